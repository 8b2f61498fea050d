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
Installer for OpenMPI.

lp64 and ilp64 builds (default integer size of the Fortran bindings) are installed side by side.
"""
from hpcinstall.framework.config import INTEGER_VARIANTS
from hpcinstall.installers.generic.configuremake import ConfigureMake


class OpenMPI(ConfigureMake):
    """OpenMPI support."""

    name = 'openmpi'
    description = "Open source Message Passing Interface implementation"
    default_version = '5.0.8'

    variants = INTEGER_VARIANTS
    default_variant = 'lp64'

    source_url = 'https://download.open-mpi.org/release/open-mpi/v%(version_major_minor)s/openmpi-%(version)s.tar.gz'
    git_url = 'https://github.com/open-mpi/ompi.git'
    git_recursive = True
    bootstrap_cmd = './autogen.pl'

    sanity_check_paths = {
        'executables': ['bin/mpicc', 'bin/mpirun'],
        'dirs': ['include', 'lib'],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export MPI_HOME=%(symlink)s",
        "  export PATH=${MPI_HOME}/bin:$PATH",
    ]

    def build_env(self):
        """Use 8-byte default integers in the Fortran bindings for ilp64 builds."""
        if self.variant == 'ilp64':
            return {'FCFLAGS': '-fdefault-integer-8'}
        return {}
