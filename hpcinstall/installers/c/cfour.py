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
Installer for CFOUR, built against OpenMPI (unless a serial build is requested) and OpenBLAS.

CFOUR is distributed after registration only, so the source archive must be put
in the source directory manually.
"""
import os
import shlex

from hpcinstall.installers.generic.configuremake import ConfigureMake
from hpcinstall.installers.generic.mpiblas import OPENBLAS_DEP, OPENMPI_DEP, describe_mpi_blas, mpi_extra_options


class CFOUR(ConfigureMake):
    """Support for building CFOUR."""

    name = 'cfour'
    description = "Coupled-Cluster techniques for Computational Chemistry"
    default_version = '2.1'

    manual_download_url = 'https://cfour.uni-mainz.de/cfour/'

    required_tools = ['gfortran', 'gcc', 'make']
    dependencies = [OPENMPI_DEP, OPENBLAS_DEP]

    sanity_check_paths = {
        'executables': ['bin/xcfour'],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export CFOUR_HOME=%(installdir)s",
        "  export PATH=$PATH:${CFOUR_HOME}/bin",
    ]

    @staticmethod
    def extra_options(extra_vars=None):
        return ConfigureMake.extra_options(extra_vars=mpi_extra_options(extra_vars))

    def build_env(self):
        """Point compiler and linker to OpenMPI (if used) and OpenBLAS."""
        ldflags, cppflags = [], []
        for name in ['openmpi', 'openblas']:
            if self.deps.get(name):
                ldflags.append('-L%s' % os.path.join(self.deps[name], 'lib'))
                cppflags.append('-I%s' % os.path.join(self.deps[name], 'include'))

        return {
            'LDFLAGS': ' '.join(ldflags),
            'CPPFLAGS': ' '.join(cppflags),
            'LIBS': '-lopenblas',
        }

    def det_configopts(self):
        if self.deps.get('openmpi'):
            return ['--enable-mpi', shlex.quote('MPI_HOME=%s' % self.deps['openmpi'])]
        return []

    def configure_step(self):
        self.log.info("Configuring CFOUR with %s", describe_mpi_blas(self.deps))
        super(CFOUR, self).configure_step()

    def build_step(self):
        """CFOUR does not support parallel builds."""
        self.run_cmd('make', 'make')
