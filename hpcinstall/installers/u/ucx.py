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
Installer for UCX, using the release configuration script it ships with.
"""
from hpcinstall.installers.generic.configuremake import ConfigureMake


class UCX(ConfigureMake):
    """Support for building UCX."""

    name = 'ucx'
    description = "Unified Communication X, communication framework for data-centric and HPC applications"
    default_version = '1.15.0'
    dev_ref = 'master'

    source_url = 'https://github.com/openucx/ucx/releases/download/v%(version)s/ucx-%(version)s.tar.gz'
    git_url = 'https://github.com/openucx/ucx.git'

    configure_cmd = './contrib/configure-release'
    bootstrap_cmd = './autogen.sh'

    sanity_check_paths = {
        'files': ['lib/libucp.so'],
        'executables': ['bin/ucx_info'],
    }
