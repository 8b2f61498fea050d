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
Installer for MOLDEN.

Development versions are only available as source tarballs, which declare no version,
so they are always installed as <year>.<month>-dev.
"""
import os

from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.config import IGNORE
from easybuild.tools.filetools import which
from easybuild.tools.run import run_shell_cmd

from hpcinstall.framework.errors import warn_best_effort
from hpcinstall.installers.generic.makecp import MakeCp, copy_files, fix_executables

MOLDEN_EXECUTABLES = ['gmolden', 'molden', 'ambfor', 'ambmd']


class Molden(MakeCp):
    """Support for building MOLDEN with gfortran and copying the executables."""

    name = 'molden'
    description = "Pre- and post-processing program of molecular and electronic structure"
    default_version = '7.3'
    dev_ref = 'dev'

    source_url = 'https://ftp.science.ru.nl/Molden/molden%(version)s.tar.gz'
    dev_url = source_url

    required_tools = ['gfortran', 'make']
    version_probes = []

    sanity_check_paths = {
        'executables': [('bin/gmolden', 'bin/molden')],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export MOLDEN_HOME=%(installdir)s",
        "  export PATH=$PATH:${MOLDEN_HOME}/bin",
    ]

    def check_deps_step(self):
        """Also check for X11 and OpenGL development libraries, only required for graphical features."""
        super(Molden, self).check_deps_step()

        if which('pkg-config', on_error=IGNORE) is None:
            self.log.info("pkg-config not available, not checking for X11 and OpenGL development libraries")
            return

        for lib, feature in [('x11', "X11-based visualization"), ('gl', "gmolden graphical features")]:
            res = run_shell_cmd('pkg-config %s' % lib, fail_on_error=False, hidden=True)
            if res.exit_code:
                warn_best_effort("%s development libraries not found (%s may be limited)", lib, feature, log=self.log)

    def det_buildopts(self):
        return ['FC=gfortran']

    def install_step(self):
        """Copy the executables that were built to bin/."""
        found = [exe for exe in MOLDEN_EXECUTABLES if os.path.isfile(os.path.join(self.srcdir, exe))]
        if not found:
            raise EasyBuildError("None of the MOLDEN executables (%s) found in %s",
                                 ', '.join(MOLDEN_EXECUTABLES), self.srcdir)

        copy_files([(found, 'bin')], self.srcdir, self.installdir, self.log)
        fix_executables(self.installdir, [os.path.join('bin', exe) for exe in found])
