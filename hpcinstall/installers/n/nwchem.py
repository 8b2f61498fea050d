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
Installer for NWChem, built in the source tree with its own make-based build system.

The NWChem executable and data files are copied into the installation directory afterwards.
"""
import os
import re

from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.filetools import copy_dir

from hpcinstall.framework.errors import warn_best_effort
from hpcinstall.framework.version import CMAKE_PROBE, VersionProbe
from hpcinstall.installers.generic.makecp import MakeCp
from hpcinstall.installers.generic.mpiblas import OPENBLAS_DEP, OPENMPI_DEP, describe_mpi_blas, mpi_blas_env
from hpcinstall.installers.generic.mpiblas import mpi_extra_options

NWCHEM_TARGET = 'LINUX64'

NWCHEM_F90_PROBE = VersionProbe(os.path.join('src', 'nwchem.F90'),
                                re.compile(r'''program_version\s*=\s*['"]?([^'"\s]+)'''))


class NWChem(MakeCp):
    """Support for building and installing NWChem."""

    name = 'nwchem'
    description = "Open source high-performance computational chemistry"
    default_version = '7.3.0'
    dev_ref = 'master'

    git_url = 'https://github.com/nwchemgit/nwchem.git'
    git_ref = 'release-%(version_dashes)s'
    version_probes = [CMAKE_PROBE, NWCHEM_F90_PROBE]

    required_tools = ['gfortran', 'make', 'git']
    dependencies = [OPENMPI_DEP, OPENBLAS_DEP]

    files_to_copy = [([os.path.join('bin', NWCHEM_TARGET, 'nwchem')], 'bin')]
    executables_to_fix = ['bin/nwchem']

    sanity_check_paths = {
        'executables': ['bin/nwchem'],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export NWCHEM_HOME=%(installdir)s",
        "  export PATH=$PATH:${NWCHEM_HOME}/bin",
    ]

    @staticmethod
    def extra_options(extra_vars=None):
        return MakeCp.extra_options(extra_vars=mpi_extra_options(extra_vars))

    def build_env(self):
        res = {
            'NWCHEM_TOP': self.srcdir,
            'NWCHEM_TARGET': NWCHEM_TARGET,
            'NWCHEM_MODULES': 'all',
        }
        res.update(mpi_blas_env(self.deps))
        return res

    def configure_step(self):
        """Generate NWChem build configuration."""
        self.log.info("Configuring NWChem with %s", describe_mpi_blas(self.deps))
        self.run_cmd('nwchem_config', 'make nwchem_config', work_dir=os.path.join(self.srcdir, 'src'))

    def build_step(self):
        cmd = ' '.join(['make', 'FC=gfortran', self.parallel_flag])
        self.run_cmd('make', cmd, work_dir=os.path.join(self.srcdir, 'src'))

    def install_step(self):
        """Copy NWChem executable, and data files if there are any."""
        super(NWChem, self).install_step()

        datadir = os.path.join(self.srcdir, 'data')
        if os.path.isdir(datadir):
            try:
                copy_dir(datadir, os.path.join(self.installdir, 'data'), symlinks=True, dirs_exist_ok=True)
            except EasyBuildError as err:
                warn_best_effort("Failed to copy data files from %s: %s", datadir, err.msg, log=self.log)
