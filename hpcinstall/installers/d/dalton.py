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
Installer for Dalton, always built with MPI (OpenMPI compiler wrappers) and OpenBLAS.

The setup script creates the build tree in the installation directory itself,
Dalton is used from there.
"""
import os
import shlex

from hpcinstall.framework.config import INTEGER_VARIANTS
from hpcinstall.framework.layout import Dependency
from hpcinstall.framework.version import SETUP_PY_PROBE, VERSION_FILE_PROBE
from hpcinstall.installers.generic.mpiblas import OPENBLAS_DEP
from hpcinstall.installers.generic.setupmake import SetupMake


class Dalton(SetupMake):
    """Support for building Dalton."""

    name = 'dalton'
    description = "Molecular electronic structure program"
    default_version = '2025.0'
    dev_ref = 'master'

    variants = INTEGER_VARIANTS
    default_variant = 'lp64'

    git_url = 'https://gitlab.com/dalton/dalton.git'
    git_recursive = True
    git_shallow = False
    version_probes = [VERSION_FILE_PROBE, SETUP_PY_PROBE]

    required_tools = ['cmake', 'make', 'git']
    dependencies = [Dependency('openmpi'), OPENBLAS_DEP]

    sanity_check_paths = {
        'files': [('dalton', 'dalton.x')],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export DALTON_HOME=%(installdir)s",
        "  export PATH=$PATH:${DALTON_HOME}",
    ]

    @property
    def setup_target(self):
        return self.installdir

    def det_setupopts(self):
        """Use OpenMPI compiler wrappers, and OpenBLAS for both BLAS and LAPACK."""
        mpi_bin = os.path.join(self.deps['openmpi'], 'bin')
        libopenblas = os.path.join(self.deps['openblas'], 'lib', 'libopenblas.so')
        opts = [
            '--mpi',
            '--fc %s' % shlex.quote(os.path.join(mpi_bin, 'mpif90')),
            '--cc %s' % shlex.quote(os.path.join(mpi_bin, 'mpicc')),
            '--cxx %s' % shlex.quote(os.path.join(mpi_bin, 'mpicxx')),
            '--blas %s' % shlex.quote(libopenblas),
            '--lapack %s' % shlex.quote(libopenblas),
        ]
        if self.variant == 'ilp64':
            opts.append('--int64')
        return opts
