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
Installer for xtb4stda, built with the Intel oneAPI compilers.
"""
import os
import shlex

from easybuild.framework.easyconfig import CUSTOM

from hpcinstall.framework.errors import DependencyMissingError
from hpcinstall.framework.version import CMAKE_PROBE, SETUP_PY_PROBE, VERSION_FILE_PROBE
from hpcinstall.installers.generic.makecp import MakeCp

DEFAULT_ONEAPI_SETVARS = '/software/kemi/intel/oneapi/setvars.sh'

DEPENDENCIES_NOTES = """=== External Dependencies for xtb4stda ===

Required external software/modules (must be sourced in submit scripts):

1. Intel oneAPI
   Version: 2024.0 or later
   Components:
     - ifx: Intel Fortran compiler (LLVM-based)
     - icx: Intel C compiler
   Purpose: Provides Fortran and C compilers for xtb4stda
   Required for: Building and running xtb4stda

=== Usage in HPC Submit Scripts ===

Intel oneAPI must be sourced before running xtb4stda:

  source %(oneapi_setvars)s --force
  export XTB4STDAHOME=%(symlink)s
  export PATH=$PATH:${XTB4STDAHOME}/bin
  export OMP_NUM_THREADS=8
  export MKL_NUM_THREADS=8
  xtb4stda coord > gs.stda-xtb.out
"""


class Xtb4stda(MakeCp):
    """Support for building xtb4stda."""

    name = 'xtb4stda'
    description = "Extended tight-binding ground state for simplified TDA/TD-DFT calculations"
    default_version = '1.1.1'

    git_url = 'https://github.com/grimme-lab/xtb4stda.git'
    git_shallow = False
    version_probes = [VERSION_FILE_PROBE, SETUP_PY_PROBE, CMAKE_PROBE]

    required_tools = ['make', 'ruby', 'git']

    files_to_copy = [(['exe/xtb4stda'], 'bin')]
    executables_to_fix = ['bin/xtb4stda']

    sanity_check_paths = {
        'executables': ['bin/xtb4stda'],
    }

    dependencies_notes = DEPENDENCIES_NOTES

    @staticmethod
    def extra_options(extra_vars=None):
        """Location of the Intel oneAPI environment script."""
        extra = {
            'oneapi_setvars': [DEFAULT_ONEAPI_SETVARS, "Script that sets up the Intel oneAPI environment", CUSTOM],
        }
        if extra_vars is not None:
            extra.update(extra_vars)
        return MakeCp.extra_options(extra_vars=extra)

    def template_values(self):
        res = super(Xtb4stda, self).template_values()
        res['oneapi_setvars'] = self.cfg['oneapi_setvars']
        return res

    def check_deps_step(self):
        """Also check for Intel oneAPI."""
        super(Xtb4stda, self).check_deps_step()
        if not os.path.isfile(self.cfg['oneapi_setvars']):
            raise DependencyMissingError("Intel oneAPI not found, %s does not exist", self.cfg['oneapi_setvars'])

    def build_step(self):
        """Build serially (Fortran module dependencies) with ifx/icx, in the oneAPI environment."""
        cmd = "source %s --force > /dev/null 2>&1; make FC=ifx CC=icx" % shlex.quote(self.cfg['oneapi_setvars'])
        self.run_cmd('make', cmd)
