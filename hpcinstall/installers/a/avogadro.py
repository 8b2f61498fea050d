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
Installer for the Avogadro 2 application (avogadroapp).

The libraries it builds on (spglib, GLEW, ...) have their own installers.
"""
from hpcinstall.framework.version import CMAKE_PROBE
from hpcinstall.installers.generic.cmakemake import CMakeMake


class Avogadro(CMakeMake):
    """Support for building Avogadro with CMake."""

    name = 'avogadro'
    description = "Molecular editor and visualizer"
    default_version = '1.102.1'
    dev_ref = 'master'

    git_url = 'https://github.com/openchemistry/avogadroapp.git'

    required_tools = ['cmake', 'make', 'git', 'gcc']
    version_probes = [CMAKE_PROBE]

    sanity_check_paths = {
        'executables': ['bin/avogadro'],
    }

    env_hints = [
        "Add to your shell profile:",
        "  export AVOGADRO_HOME=%(installdir)s",
        "  export PATH=$PATH:${AVOGADRO_HOME}/bin",
    ]

    def det_configopts(self):
        return ['-DENABLE_TESTING=ON']
