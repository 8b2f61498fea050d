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
Shared support for packages that are built against the OpenMPI and OpenBLAS installations
provided by the openmpi and openblas installers.
"""
import os

from easybuild.framework.easyconfig import CUSTOM

from hpcinstall.framework.layout import Dependency

# an explicit OpenMPI version always refers to the lp64 build
OPENMPI_DEP = Dependency('openmpi', version_option='openmpi_version', variant='lp64', optional_option='serial')
OPENBLAS_DEP = Dependency('openblas')


def mpi_extra_options(extra_vars=None):
    """Options to select whether and which OpenMPI installation to build with."""
    extra = {
        'serial': [False, "Build without MPI support", CUSTOM],
        'openmpi_version': ['default', "OpenMPI version to build with ('default' follows the default symlink)",
                            CUSTOM],
    }
    if extra_vars is not None:
        extra.update(extra_vars)
    return extra


def mpi_blas_env(deps):
    """
    Environment variables pointing to the OpenMPI (if used) and OpenBLAS installations.

    :param deps: dict with located dependencies (name -> installation directory)
    """
    res = {}

    openmpi_dir = deps.get('openmpi')
    if openmpi_dir:
        res.update({
            'MPI_LOC': openmpi_dir,
            'MPI_INCLUDE': os.path.join(openmpi_dir, 'include'),
            'MPI_LIB': os.path.join(openmpi_dir, 'lib'),
        })

    openblas_dir = deps['openblas']
    res.update({
        'BLAS_LOC': openblas_dir,
        'BLASOPT': '-L%s -lopenblas' % os.path.join(openblas_dir, 'lib'),
    })

    return res


def describe_mpi_blas(deps):
    """One-line summary of the MPI and BLAS installations that are used."""
    if deps.get('openmpi'):
        mpi = "enabled (%s)" % deps['openmpi']
    else:
        mpi = "disabled (serial)"
    return "MPI: %s, BLAS: %s" % (mpi, deps['openblas'])
