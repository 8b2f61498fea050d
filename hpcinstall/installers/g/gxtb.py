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
Installer for g-xTB: the (prebuilt) executable and its parameter files are taken from the git repository.
"""
from hpcinstall.framework.version import SETUP_PY_PROBE, VERSION_FILE_PROBE
from hpcinstall.installers.generic.binary import Binary


class GXtb(Binary):
    """Support for installing g-xTB."""

    name = 'gxtb'
    description = "General-purpose extended tight-binding method"
    default_version = '1.1.0'

    git_url = 'https://github.com/grimme-lab/g-xtb.git'
    git_shallow = False
    version_probes = [VERSION_FILE_PROBE, SETUP_PY_PROBE]

    files_to_copy = ['binary/gxtb', 'parameters']
    executables_to_fix = ['gxtb']

    sanity_check_paths = {
        'executables': ['gxtb'],
        'dirs': ['parameters'],
    }

    env_hints = [
        "Set GXTBHOME=%(installdir)s/parameters to use g-xTB",
    ]
