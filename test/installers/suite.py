##
# Copyright 2026 hpcinstall contributors
#
# This file is part of hpcinstall.
#
# hpcinstall is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation v2.
#
# hpcinstall is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with hpcinstall.  If not, see <http://www.gnu.org/licenses/>.
##
"""
This script is a collection of all the testcases for hpcinstall.
Usage: "python -m test.installers.suite" or "python test/installers/suite.py"
"""
import glob
import os
import shutil
import sys
import tempfile
import unittest

from easybuild.base import fancylogger
from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.options import set_tmpdir

import test.installers.test_archive as a
import test.installers.test_init_installers as i
import test.installers.test_installer as inst
import test.installers.test_installer_specific as s
import test.installers.test_layout as lo
import test.installers.test_main as m
import test.installers.test_runner as r
import test.installers.test_symlinks as sl
import test.installers.test_version as v

# initialize logger for all the unit tests
fd, log_fn = tempfile.mkstemp(prefix='hpcinstall-tests-', suffix='.log')
os.close(fd)
os.remove(log_fn)
fancylogger.logToFile(log_fn)
log = fancylogger.getLogger()
log.setLevelName('DEBUG')

try:
    tmpdir = set_tmpdir(raise_error=True)
except EasyBuildError as err:
    sys.stderr.write("No execution rights on temporary files, specify another location via $TMPDIR: %s\n" % err)
    sys.exit(1)

# call suite() for each module and then run them all
SUITE = unittest.TestSuite([x.suite() for x in [v, lo, sl, a, r, inst, i, s, m]])
res = unittest.TextTestRunner().run(SUITE)

fancylogger.logToFile(log_fn, enable=False)

if not res.wasSuccessful():
    sys.stderr.write("ERROR: Not all tests were successful.\n")
    print("Log available at %s" % log_fn)
    sys.exit(2)
else:
    for f in glob.glob('%s*' % log_fn):
        os.remove(f)
    shutil.rmtree(tmpdir)
