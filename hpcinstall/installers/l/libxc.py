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
Installer for Libxc.
"""
from hpcinstall.installers.generic.cmakemake import CMakeMake


class Libxc(CMakeMake):
    """Support for building/installing Libxc (shared libraries only)."""

    name = 'libxc'
    description = "Library of exchange-correlation functionals for density-functional theory"
    default_version = '7.0.0'
    dev_ref = 'master'
    default_symlink_name = 'latest'

    source_url = 'https://gitlab.com/libxc/libxc/-/archive/%(version)s/libxc-%(version)s.tar.bz2'
    source_ext = '.tar.bz2'
    git_url = 'https://gitlab.com/libxc/libxc.git'
    git_ref = '%(version)s'

    sanity_check_paths = {
        'files': ['lib/libxc.so', 'include/xc.h'],
    }

    def det_configopts(self):
        return [
            '-DCMAKE_POSITION_INDEPENDENT_CODE=ON',
            '-DBUILD_SHARED_LIBS=ON',
            '-DBUILD_TESTING=OFF',
        ]
