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
Installer for OpenBLAS, built for all CPU architectures (DYNAMIC_ARCH) with OpenMP support.
"""
import shlex

from hpcinstall.framework.config import INTEGER_VARIANTS
from hpcinstall.installers.generic.configuremake import ConfigureMake


class OpenBLAS(ConfigureMake):
    """Support for building/installing OpenBLAS."""

    name = 'openblas'
    description = "Optimized BLAS library based on GotoBLAS2"
    default_version = '0.3.28'
    dev_ref = 'develop'

    variants = INTEGER_VARIANTS
    default_variant = 'lp64'

    source_url = 'https://github.com/OpenMathLib/OpenBLAS/releases/download/v%(version)s/OpenBLAS-%(version)s.tar.gz'
    git_url = 'https://github.com/OpenMathLib/OpenBLAS.git'

    sanity_check_paths = {
        'files': ['lib/libopenblas.so'],
        'dirs': ['include'],
    }

    def det_buildopts(self):
        """Build options, also used for 'make install' since they determine what is installed."""
        opts = ['DYNAMIC_ARCH=1', 'USE_OPENMP=1', 'NO_SHARED=0', shlex.quote('PREFIX=%s' % self.installdir)]
        if self.variant == 'ilp64':
            opts.append('INTERFACE64=1')
        return opts

    def det_installopts(self):
        return self.det_buildopts()

    def configure_step(self):
        """No configure script for OpenBLAS"""
        pass
