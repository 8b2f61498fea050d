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
Installer for spglib.
"""
from hpcinstall.framework.version import CMAKE_PROBE
from hpcinstall.installers.generic.cmakemake import CMakeMake


class Spglib(CMakeMake):
    """Support for building spglib with CMake."""

    name = 'spglib'
    description = "C library for finding and handling crystal symmetries"
    default_version = '2.3.1'
    dev_ref = 'develop'

    source_url = 'https://github.com/atztogo/spglib/archive/refs/tags/v%(version)s.tar.gz'
    git_url = 'https://github.com/spglib/spglib.git'

    required_tools = ['cmake', 'make', 'gcc']
    version_probes = [CMAKE_PROBE]

    sanity_check_paths = {
        'files': [('lib/libsymspacegroup.so', 'lib/libsymspacegroup.a')],
    }

    env_hints = [
        "Add to your shell profile or CMake builds:",
        "  export SPGLIB_HOME=%(installdir)s",
        "  export CMAKE_PREFIX_PATH=$CMAKE_PREFIX_PATH:${SPGLIB_HOME}",
        "  export PKG_CONFIG_PATH=$PKG_CONFIG_PATH:${SPGLIB_HOME}/lib/pkgconfig",
    ]
