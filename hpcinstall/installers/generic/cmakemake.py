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
General installer for software that uses CMake, building in the 'build' subdirectory
of the installation directory.
"""
import shlex

from easybuild.tools.filetools import mkdir

from hpcinstall.framework.installer import Installer


class CMakeMake(Installer):
    """Support for configuring build with CMake instead of traditional configure script"""

    build_in_subdir = True
    build_type = 'Release'
    required_tools = ['cmake']

    def det_configopts(self):
        """Extra options to pass to cmake, e.g. -DBUILD_SHARED_LIBS=ON."""
        return []

    def configure_step(self):
        """Configure build using cmake"""
        mkdir(self.builddir, parents=True)

        cmd = [
            'cmake',
            shlex.quote(self.srcdir),
            shlex.quote('-DCMAKE_INSTALL_PREFIX=%s' % self.installdir),
            '-DCMAKE_BUILD_TYPE=%s' % self.build_type,
        ]
        cmd.extend(self.det_configopts())
        self.run_cmd('cmake', ' '.join(cmd))

    def build_step(self):
        """Build with 'cmake --build'."""
        self.run_cmd('cmake --build', 'cmake --build . --parallel %d' % self.parallel)

    def install_step(self):
        """Install with 'cmake --install'."""
        self.run_cmd('cmake --install', 'cmake --install .')
