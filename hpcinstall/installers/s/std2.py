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
Installer for std2, built with make and gfortran.

The libcint library is cloned into the source tree when it is not there yet.
"""
import os
import shlex

from hpcinstall.framework.archive import git_clone
from hpcinstall.framework.version import CMAKE_PROBE, SETUP_PY_PROBE, VERSION_FILE_PROBE
from hpcinstall.installers.generic.configuremake import ConfigureMake

LIBCINT_GIT_URL = 'https://github.com/sunqm/libcint.git'

DEPENDENCIES_NOTES = """=== External Dependencies for std2 ===

Required external software/modules (must be sourced in submit scripts):

1. GNU Compiler Collection (GCC/gfortran)
   Version: GCC 11.5.0 or later
   Components:
     - gfortran: GNU Fortran compiler
     - gcc: GNU C compiler
   Usually pre-installed on Linux systems
   Purpose: Provides Fortran and C compilers for std2
   Required for: Building and running std2

=== Usage in HPC Submit Scripts ===

Example bash submit script for std2:

  export STD2HOME=%(symlink)s
  export PATH=$PATH:${STD2HOME}/bin
  std2 input.in
"""


class Std2(ConfigureMake):
    """Support for building std2."""

    name = 'std2'
    description = "Simplified time-dependent density functional theory (sTDA/sTD-DFT) program"
    default_version = '2.0.1'

    git_url = 'https://github.com/grimme-lab/std2.git'
    git_shallow = False
    version_probes = [VERSION_FILE_PROBE, SETUP_PY_PROBE, CMAKE_PROBE]

    required_tools = ['gfortran', 'gcc', 'make', 'git']

    sanity_check_paths = {
        'executables': ['bin/std2'],
    }

    dependencies_notes = DEPENDENCIES_NOTES

    env_hints = [
        "Add to your shell profile:",
        "  export STD2HOME=%(installdir)s",
        "  export PATH=$PATH:${STD2HOME}/bin",
    ]

    def configure_step(self):
        """No configure script, but make sure libcint is available."""
        libcint_dir = os.path.join(self.srcdir, 'libcint')
        if os.path.isdir(libcint_dir) and os.listdir(libcint_dir):
            self.log.info("Using libcint in %s", libcint_dir)
        else:
            git_clone(LIBCINT_GIT_URL, 'master', libcint_dir, log=self.log)

    def det_buildopts(self):
        return [shlex.quote('PREFIX=%s' % self.installdir), 'FC=gfortran']

    def det_installopts(self):
        return self.det_buildopts()
