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
Installer for xtb, using the binary release.
"""
from hpcinstall.installers.generic.binary import Binary


class Xtb(Binary):
    """Support for installing the xtb binary distribution."""

    name = 'xtb'
    description = "Semiempirical extended tight-binding program package"
    default_version = '6.7.1'
    default_symlink_name = 'latest'

    source_url = 'https://github.com/grimme-lab/xtb/releases/download/v%(version)s/xtb-%(version)s-linux-x86_64.tar.xz'
    source_ext = '.tar.xz'

    executables_to_fix = ['bin/xtb']

    sanity_check_paths = {
        'executables': ['bin/xtb'],
        'dirs': ['share/xtb'],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export XTBHOME=%(symlink)s",
        "  export PATH=$PATH:${XTBHOME}/bin",
    ]
