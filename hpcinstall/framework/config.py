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
Configuration for hpcinstall: location of the build and source trees, and
bootstrapping of the easybuild-framework configuration that its file and
command helpers rely on.
"""
import os

import easybuild.tools.options as eboptions
from easybuild.base import fancylogger
from easybuild.tools import config
from easybuild.tools.options import set_tmpdir

SOFTWARE_ROOT = os.path.join(os.path.expanduser('~'), 'software')
DEFAULT_BUILDPATH = os.path.join(SOFTWARE_ROOT, 'build')
DEFAULT_SOURCEPATH = os.path.join(SOFTWARE_ROOT, 'src', 'external')

BUILDPATH_ENV_VAR = 'HPCINSTALL_BUILDPATH'
SOURCEPATH_ENV_VAR = 'HPCINSTALL_SOURCEPATH'

DEFAULT_SYMLINK_NAME = 'default'
# version selecting whatever the default symlink of a dependency points to
DEFAULT_DEP_VERSION = 'default'

# integer width of the default Fortran integer / BLAS interface
INTEGER_VARIANTS = ('lp64', 'ilp64')

LOCK_FILE_NAME = '.hpcinstall.lock'

_log = fancylogger.getLogger('hpcinstall.config', fname=False)

_easybuild_configured = False


def buildpath(path=None):
    """Determine build root: explicit value, $HPCINSTALL_BUILDPATH or ~/software/build."""
    return os.path.abspath(os.path.expanduser(path or os.getenv(BUILDPATH_ENV_VAR) or DEFAULT_BUILDPATH))


def sourcepath(path=None):
    """Determine source root: explicit value, $HPCINSTALL_SOURCEPATH or ~/software/src/external."""
    return os.path.abspath(os.path.expanduser(path or os.getenv(SOURCEPATH_ENV_VAR) or DEFAULT_SOURCEPATH))


def default_parallel():
    """Number of parallel build jobs to use when not specified."""
    return os.cpu_count() or 1


def init_easybuild_config():
    """
    Set up the easybuild-framework configuration (once per process).

    The helpers from easybuild.tools.filetools and easybuild.tools.run query build options,
    which are only defined after this has been done.
    """
    global _easybuild_configured

    if _easybuild_configured:
        return

    eb_go = eboptions.parse_options(args=[])
    config.init(eb_go.options, eb_go.get_options_by_section('config'))
    config.init_build_options()
    tmpdir = set_tmpdir()
    _log.debug("easybuild-framework configuration initialized, using temporary directory %s", tmpdir)

    _easybuild_configured = True
