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
Installer for GLEW (OpenGL Extension Wrangler Library).
"""
import shlex

from hpcinstall.installers.generic.configuremake import ConfigureMake


class GLEW(ConfigureMake):
    """Support for building GLEW with its plain Makefile."""

    name = 'glew'
    description = "OpenGL Extension Wrangler Library"
    default_version = '2.2.0'
    dev_ref = 'master'

    source_url = 'https://github.com/nigels-com/glew/archive/refs/tags/%(version)s.tar.gz'
    git_url = 'https://github.com/nigels-com/glew.git'
    # release tags are used as is
    git_ref = '%(version)s'

    required_tools = ['make', 'gcc']

    sanity_check_paths = {
        'files': [('lib/libGLEW.so', 'lib64/libGLEW.so')],
        'dirs': ['include/GL'],
    }

    env_hints = [
        "Add to your shell profile or CMake builds:",
        "  export GLEW_HOME=%(installdir)s",
        "  export CMAKE_PREFIX_PATH=$CMAKE_PREFIX_PATH:${GLEW_HOME}",
    ]

    def det_buildopts(self):
        return [shlex.quote('GLEW_DEST=%s' % self.installdir)]

    def det_installopts(self):
        return self.det_buildopts()

    def configure_step(self):
        """No configure script for GLEW"""
        pass
