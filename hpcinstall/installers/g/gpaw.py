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
Installer for GPAW, installed in a uv-managed virtual environment together with its Python dependencies.

The C extensions are built against the OpenMPI, OpenBLAS and libxc installations, as specified in
siteconfig.py. If the sources do not include one, it is generated from the located dependencies.
"""
import os
import shlex

from easybuild.framework.easyconfig import CUSTOM
from easybuild.tools.filetools import write_file

from hpcinstall.framework.config import DEFAULT_DEP_VERSION, INTEGER_VARIANTS
from hpcinstall.framework.errors import ValidationError
from hpcinstall.framework.installer import Installer
from hpcinstall.framework.layout import Dependency

SITECONFIG_TMPL = """# GPAW build configuration
# Auto-generated siteconfig.py

# Compiler settings
compiler_flags = {}

# MPI settings
mpi = True

# Libraries
libraries = []
library_dirs = []
include_dirs = []

# OpenMPI
mpi_prefix = '%(openmpi)s'
mpi_include_dir = '%(openmpi)s/include'

# OpenBLAS
blas_include_dirs = ['%(openblas)s/include']
blas_libraries = ['openblas']
blas_library_dirs = ['%(openblas)s/lib']

# libxc
libxc = True
libxc_prefix = '%(libxc)s'

# Build settings
extra_compile_args = ['-O3', '-march=native', '-fPIC']
"""

PYTHON_DEPS = ['numpy', 'scipy', 'ase', 'mpi4py', 'matplotlib']


class GPAW(Installer):
    """Support for installing GPAW in a virtual environment."""

    name = 'gpaw'
    description = "Density-functional theory Python code based on the projector-augmented wave method"
    default_version = '25.1.0'

    source_url = 'https://gitlab.com/gpaw/gpaw/-/archive/%(version)s/gpaw-%(version)s.tar.gz'
    git_url = 'https://gitlab.com/gpaw/gpaw.git'
    git_ref = '%(version)s'
    dev_ref = 'master'

    required_tools = ['uv']
    dependencies = [
        Dependency('openmpi', version_option='openmpi_version'),
        Dependency('openblas', version_option='openblas_version'),
        Dependency('libxc', version_option='libxc_version', symlink_name='latest'),
    ]

    sanity_check_paths = {
        'executables': ['venv/bin/gpaw'],
        'files': ['requirements.txt'],
        'dirs': ['share'],
    }

    env_hints = [
        "Activate the GPAW environment with:",
        "  source %(installdir)s/venv/bin/activate",
        "  export GPAW_SETUP_PATH=%(installdir)s/share",
    ]

    @staticmethod
    def extra_options(extra_vars=None):
        extra = {
            'precision': ['lp64', "Integer size of the OpenMPI and OpenBLAS builds to use (%s)" %
                          '/'.join(INTEGER_VARIANTS), CUSTOM],
            'openmpi_version': [DEFAULT_DEP_VERSION, "OpenMPI version to build with", CUSTOM],
            'openblas_version': [DEFAULT_DEP_VERSION, "OpenBLAS version to build with", CUSTOM],
            'libxc_version': [DEFAULT_DEP_VERSION, "libxc version to build with", CUSTOM],
        }
        if extra_vars is not None:
            extra.update(extra_vars)
        return Installer.extra_options(extra_vars=extra)

    @property
    def venv_dir(self):
        return os.path.join(self.installdir, 'venv')

    def validate_step(self):
        """Also check the precision."""
        super(GPAW, self).validate_step()
        if self.cfg['precision'] not in INTEGER_VARIANTS:
            raise ValidationError("Precision must be one of %s, found '%s'",
                                  ', '.join(INTEGER_VARIANTS), self.cfg['precision'])

    def dependency_variant(self, dep):
        """Explicit OpenMPI and OpenBLAS versions refer to the build with the selected precision."""
        if dep.name == 'libxc':
            return None
        return self.cfg['precision']

    def build_env(self):
        """Run all commands in the virtual environment."""
        venv_bin = os.path.join(self.venv_dir, 'bin')
        path = os.getenv('PATH', '')
        if path.split(os.pathsep)[0] != venv_bin:
            path = os.pathsep.join([venv_bin, path]) if path else venv_bin
        return {
            'VIRTUAL_ENV': self.venv_dir,
            'PATH': path,
        }

    def configure_step(self):
        """Generate siteconfig.py (unless the sources include one), and create the virtual environment."""
        siteconfig = os.path.join(self.srcdir, 'siteconfig.py')
        if os.path.exists(siteconfig):
            self.log.info("Using existing %s", siteconfig)
        else:
            write_file(siteconfig, SITECONFIG_TMPL % self.deps)
            self.log.info("Generated %s", siteconfig)

        self.run_cmd('venv', 'uv venv %s' % shlex.quote(self.venv_dir), work_dir=self.srcdir)

    def build_step(self):
        """Install Python dependencies, and build GPAW from source."""
        self.run_cmd('pip upgrade', 'uv pip install --upgrade pip wheel setuptools', work_dir=self.srcdir)
        self.run_cmd('dependencies', 'uv pip install %s' % ' '.join(PYTHON_DEPS), work_dir=self.srcdir)
        self.run_cmd('gpaw', 'uv pip install -vv --no-build-isolation --no-binary=gpaw .', work_dir=self.srcdir)

    def install_step(self):
        """Install PAW datasets, and freeze the installed Python packages."""
        self.run_cmd('install-data', 'gpaw install-data %s' % shlex.quote(os.path.join(self.installdir, 'share')),
                     work_dir=self.installdir)
        self.run_cmd('freeze', 'uv pip freeze > %s' % shlex.quote(os.path.join(self.installdir, 'requirements.txt')),
                     work_dir=self.installdir)
