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
Installer for ORCA.

ORCA can only be downloaded after registration, so the archive must be put in the source directory manually.
"""
from hpcinstall.installers.generic.binary import Binary


class ORCA(Binary):
    """Support for installing the ORCA binary distribution."""

    name = 'orca'
    description = "Ab initio, DFT and semiempirical quantum chemistry program package"
    default_version = '6.1.0'

    source_ext = '.tar.xz'
    manual_download_url = 'https://orcaforum.kofo.mpg.de'

    sanity_check_paths = {
        'executables': ['orca'],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export ORCA_HOME=%(installdir)s",
        "  export PATH=$PATH:${ORCA_HOME}",
    ]
