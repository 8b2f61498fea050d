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
Installer for DIRAC.

DIRAC is used from the build tree in the 'build' subdirectory of the installation directory.
"""
import os

from easybuild.tools.filetools import copy_file

from hpcinstall.framework.version import CMAKE_PROBE, VERSION_FILE_PROBE
from hpcinstall.installers.generic.makecp import fix_executables
from hpcinstall.installers.generic.mpiblas import OPENBLAS_DEP, OPENMPI_DEP, describe_mpi_blas, mpi_blas_env
from hpcinstall.installers.generic.mpiblas import mpi_extra_options
from hpcinstall.installers.generic.setupmake import SetupMake


class DIRAC(SetupMake):
    """Support for building DIRAC."""

    name = 'dirac'
    description = "Relativistic ab initio quantum chemistry program"
    default_version = '25.0'
    dev_ref = 'master'

    git_url = 'https://gitlab.com/dirac/dirac.git'
    git_recursive = True
    git_shallow = False
    version_probes = [VERSION_FILE_PROBE, CMAKE_PROBE]

    build_in_subdir = True
    required_tools = ['cmake', 'make', 'git']
    dependencies = [OPENMPI_DEP, OPENBLAS_DEP]

    sanity_check_paths = {
        'dirs': ['build'],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export DIRAC_HOME=%(installdir)s",
        "  export PATH=$PATH:${DIRAC_HOME}/build/bin",
    ]

    @staticmethod
    def extra_options(extra_vars=None):
        return SetupMake.extra_options(extra_vars=mpi_extra_options(extra_vars))

    def build_env(self):
        return mpi_blas_env(self.deps)

    def configure_step(self):
        self.log.info("Configuring DIRAC with %s", describe_mpi_blas(self.deps))
        super(DIRAC, self).configure_step()

    def install_step(self):
        """Copy the DIRAC executable to the top of the installation directory, if it was built."""
        dirac_exe = os.path.join(self.builddir, 'bin', 'dirac')
        if os.path.isfile(dirac_exe):
            copy_file(dirac_exe, self.installdir)
            fix_executables(self.installdir, ['dirac'])
        else:
            self.log.info("No DIRAC executable found at %s, not copying it", dirac_exe)
