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
Unit tests for specific installers: the commands they run and the files they install,
checked without building any actual software.
"""
import os
import sys
from unittest import TextTestRunner, TestLoader

from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.filetools import mkdir, read_file, write_file

from hpcinstall.framework.errors import DependencyMissingError, ValidationError
from hpcinstall.framework.layout import InstallContext, det_archive_name, det_install_layout
from hpcinstall.framework.version import Release
from hpcinstall.installers import get_installer_class
from test.installers.utilities import InstallerTestCase, create_source_tree, install_fake_command

OK_SCRIPT = "#!/bin/bash\nexit 0\n"


class InstallerSpecificTest(InstallerTestCase):
    """Tests for specific installers"""

    def setUp(self):
        """Test setup."""
        super(InstallerSpecificTest, self).setUp()
        self.cmds = []

    def prepare(self, name, version=None, variant=None, options=None, deps=None):
        """
        Create installer for specified package, ready to run configure/build/install steps.
        Commands are not actually run, but collected in self.cmds as (name, cmd, work_dir) tuples.
        """
        installer = get_installer_class(name)(version=version, variant=variant, options=options,
                                              buildpath=self.buildpath, sourcepath=self.sourcepath, parallel=4,
                                              silent=True)
        installer.validate_step()

        version = installer.version_token
        installer.ctx = InstallContext(
            name=name,
            version_spec=Release(version),
            version=version,
            variant=installer.variant,
            symlink_name=installer.symlink_name,
            layout=det_install_layout(name, version, self.buildpath, self.sourcepath, variant=installer.variant,
                                      build_subdir=installer.build_in_subdir),
            archive_name=det_archive_name(name, version, installer.source_ext),
        )
        installer.deps = dict(deps or {})

        def fake_run_cmd(cmd_name, cmd, work_dir=None, env=None):
            self.cmds.append((cmd_name, cmd, work_dir or installer.builddir))

        installer.run_cmd = fake_run_cmd
        return installer

    def test_openmpi(self):
        """Test OpenMPI installer."""
        inst = self.prepare('openmpi', variant='ilp64')
        installdir = os.path.join(self.buildpath, 'openmpi', '5.0.8-ilp64')
        srcdir = os.path.join(self.sourcepath, 'openmpi-5.0.8')
        self.assertEqual(inst.installdir, installdir)

        # configure script is generated if it is missing (e.g. in a git checkout)
        inst.configure_step()
        inst.build_step()
        inst.install_step()
        expected = [
            ('bootstrap', './autogen.pl', srcdir),
            ('configure', './configure --prefix=%s' % installdir, srcdir),
            ('make', 'make -j 4', srcdir),
            ('make install', 'make install', srcdir),
        ]
        self.assertEqual(self.cmds, expected)
        self.assertEqual(inst.build_env(), {'FCFLAGS': '-fdefault-integer-8'})

        self.cmds = []
        write_file(os.path.join(srcdir, 'configure'), '')
        inst = self.prepare('openmpi')
        inst.configure_step()
        lp64_installdir = os.path.join(self.buildpath, 'openmpi', '5.0.8-lp64')
        self.assertEqual(self.cmds, [('configure', './configure --prefix=%s' % lp64_installdir, srcdir)])
        self.assertEqual(inst.build_env(), {})

        tmpl_values = inst.template_values()
        self.assertEqual(inst.source_url % tmpl_values,
                         'https://download.open-mpi.org/release/open-mpi/v5.0/openmpi-5.0.8.tar.gz')

    def test_openblas(self):
        """Test OpenBLAS installer."""
        inst = self.prepare('openblas', version='0.3.28', variant='ilp64')
        installdir = inst.installdir
        inst.configure_step()
        inst.build_step()
        inst.install_step()

        opts = 'DYNAMIC_ARCH=1 USE_OPENMP=1 NO_SHARED=0 PREFIX=%s INTERFACE64=1' % installdir
        self.assertEqual([cmd for (_, cmd, _) in self.cmds], ['make -j 4 %s' % opts, 'make %s install' % opts])

    def test_cmake_packages(self):
        """Test installers for packages that are built with CMake."""
        inst = self.prepare('libxc')
        self.assertEqual(inst.symlink_name, 'latest')
        self.assertEqual(inst.builddir, os.path.join(inst.installdir, 'build'))

        inst.configure_step()
        inst.build_step()
        inst.install_step()
        # build directory is created
        self.assertTrue(os.path.isdir(inst.builddir))

        srcdir = os.path.join(self.sourcepath, 'libxc-7.0.0')
        cmake_cmd = ' '.join([
            'cmake %s' % srcdir,
            '-DCMAKE_INSTALL_PREFIX=%s' % inst.installdir,
            '-DCMAKE_BUILD_TYPE=Release',
            '-DCMAKE_POSITION_INDEPENDENT_CODE=ON -DBUILD_SHARED_LIBS=ON -DBUILD_TESTING=OFF',
        ])
        expected = [
            ('cmake', cmake_cmd, inst.builddir),
            ('cmake --build', 'cmake --build . --parallel 4', inst.builddir),
            ('cmake --install', 'cmake --install .', inst.builddir),
        ]
        self.assertEqual(self.cmds, expected)
        self.assertEqual(inst.source_url % inst.template_values(),
                         'https://gitlab.com/libxc/libxc/-/archive/7.0.0/libxc-7.0.0.tar.bz2')

        self.cmds = []
        inst = self.prepare('avogadro')
        inst.configure_step()
        self.assertTrue(self.cmds[0][1].endswith('-DCMAKE_BUILD_TYPE=Release -DENABLE_TESTING=ON'))

    def test_glew(self):
        """Test GLEW installer."""
        inst = self.prepare('glew')
        inst.configure_step()
        inst.build_step()
        inst.install_step()
        opt = 'GLEW_DEST=%s' % inst.installdir
        self.assertEqual([cmd for (_, cmd, _) in self.cmds], ['make -j 4 %s' % opt, 'make %s install' % opt])
        self.assertEqual(inst.git_ref % inst.template_values(), '2.2.0')

    def test_cfour(self):
        """Test CFOUR installer."""
        deps = {'openmpi': '/sw/openmpi/5.0.8-lp64', 'openblas': '/sw/openblas/0.3.28-lp64'}
        inst = self.prepare('cfour', deps=deps)
        inst.configure_step()
        inst.build_step()

        configure_cmd = './configure --prefix=%s --enable-mpi MPI_HOME=/sw/openmpi/5.0.8-lp64' % inst.installdir
        self.assertEqual([cmd for (_, cmd, _) in self.cmds], [configure_cmd, 'make'])
        expected_env = {
            'LDFLAGS': '-L/sw/openmpi/5.0.8-lp64/lib -L/sw/openblas/0.3.28-lp64/lib',
            'CPPFLAGS': '-I/sw/openmpi/5.0.8-lp64/include -I/sw/openblas/0.3.28-lp64/include',
            'LIBS': '-lopenblas',
        }
        self.assertEqual(inst.build_env(), expected_env)

        # serial build
        self.cmds = []
        inst = self.prepare('cfour', options={'serial': True}, deps={'openblas': '/sw/openblas/0.3.28-lp64'})
        self.assertEqual(inst.det_dependencies(), [dep for dep in inst.dependencies if dep.name == 'openblas'])
        inst.configure_step()
        self.assertEqual(self.cmds[0][1], './configure --prefix=%s' % inst.installdir)
        self.assertEqual(inst.build_env()['LDFLAGS'], '-L/sw/openblas/0.3.28-lp64/lib')

    def test_nwchem(self):
        """Test NWChem installer."""
        deps = {'openmpi': '/sw/openmpi/default', 'openblas': '/sw/openblas/default'}
        inst = self.prepare('nwchem', deps=deps)
        srcdir = os.path.join(self.sourcepath, 'nwchem-7.3.0')
        self.assertEqual(inst.git_ref % inst.template_values(), 'release-7-3-0')

        env = inst.build_env()
        self.assertEqual(env['NWCHEM_TOP'], srcdir)
        self.assertEqual(env['NWCHEM_TARGET'], 'LINUX64')
        self.assertEqual(env['NWCHEM_MODULES'], 'all')
        self.assertEqual(env['MPI_LOC'], '/sw/openmpi/default')
        self.assertEqual(env['MPI_INCLUDE'], '/sw/openmpi/default/include')
        self.assertEqual(env['BLASOPT'], '-L/sw/openblas/default/lib -lopenblas')

        inst.configure_step()
        inst.build_step()
        expected = [
            ('nwchem_config', 'make nwchem_config', os.path.join(srcdir, 'src')),
            ('make', 'make FC=gfortran -j 4', os.path.join(srcdir, 'src')),
        ]
        self.assertEqual(self.cmds, expected)

        # serial build does not set MPI environment variables
        inst = self.prepare('nwchem', options={'serial': True}, deps={'openblas': '/sw/openblas/default'})
        self.assertFalse('MPI_LOC' in inst.build_env())

        # executable and data files are copied
        create_source_tree(srcdir, {'bin/LINUX64/nwchem': '#!/bin/bash', 'data/basis/sto-3g': 'basis'})
        mkdir(inst.installdir, parents=True)
        inst.install_step()
        self.assertTrue(os.access(os.path.join(inst.installdir, 'bin', 'nwchem'), os.X_OK))
        self.assertEqual(read_file(os.path.join(inst.installdir, 'data', 'basis', 'sto-3g')), 'basis')
        inst.sanity_check_step()

    def test_dalton(self):
        """Test Dalton installer."""
        deps = {'openmpi': '/sw/openmpi/5.0.8-lp64', 'openblas': '/sw/openblas/0.3.28-lp64'}
        inst = self.prepare('dalton', variant='ilp64', deps=deps)
        installdir = os.path.join(self.buildpath, 'dalton', '2025.0-ilp64')
        self.assertEqual(inst.installdir, installdir)

        inst.configure_step()
        inst.build_step()
        inst.install_step()

        setup_cmd = ' '.join([
            './setup --mpi',
            '--fc /sw/openmpi/5.0.8-lp64/bin/mpif90',
            '--cc /sw/openmpi/5.0.8-lp64/bin/mpicc',
            '--cxx /sw/openmpi/5.0.8-lp64/bin/mpicxx',
            '--blas /sw/openblas/0.3.28-lp64/lib/libopenblas.so',
            '--lapack /sw/openblas/0.3.28-lp64/lib/libopenblas.so',
            '--int64',
            installdir,
        ])
        expected = [
            ('setup', setup_cmd, os.path.join(self.sourcepath, 'dalton-2025.0')),
            ('make', 'make -j 4', installdir),
        ]
        self.assertEqual(self.cmds, expected)

        inst = self.prepare('dalton', deps=deps)
        self.assertFalse('--int64' in inst.det_setupopts())

    def test_dirac(self):
        """Test DIRAC installer."""
        deps = {'openblas': '/sw/openblas/default'}
        inst = self.prepare('dirac', options={'serial': True}, deps=deps)
        builddir = os.path.join(self.buildpath, 'dirac', '25.0', 'build')
        self.assertEqual(inst.builddir, builddir)
        self.assertEqual(inst.build_env(), {'BLAS_LOC': '/sw/openblas/default',
                                            'BLASOPT': '-L/sw/openblas/default/lib -lopenblas'})

        inst.configure_step()
        inst.build_step()
        expected = [
            ('setup', './setup %s' % builddir, os.path.join(self.sourcepath, 'dirac-25.0')),
            ('make', 'make -j 4', builddir),
        ]
        self.assertEqual(self.cmds, expected)

        # executable is copied to top of installation directory, if it was built
        inst.install_step()
        self.assertFalse(os.path.exists(os.path.join(inst.installdir, 'dirac')))

        create_source_tree(builddir, {'bin/dirac': '#!/bin/bash'})
        inst.install_step()
        self.assertTrue(os.access(os.path.join(inst.installdir, 'dirac'), os.X_OK))
        inst.sanity_check_step()

    def test_gpaw(self):
        """Test GPAW installer."""
        deps = {
            'openmpi': '/sw/openmpi/5.0.8-ilp64',
            'openblas': '/sw/openblas/0.3.28-ilp64',
            'libxc': '/sw/libxc/7.0.0',
        }
        options = {'precision': 'ilp64', 'openmpi_version': '5.0.8', 'openblas_version': '0.3.28'}
        inst = self.prepare('gpaw', options=options, deps=deps)
        srcdir = os.path.join(self.sourcepath, 'gpaw-25.1.0')
        venv = os.path.join(inst.installdir, 'venv')

        self.assertEqual([inst.dependency_variant(dep) for dep in inst.dependencies], ['ilp64', 'ilp64', None])
        self.assertEqual([dep.symlink_name for dep in inst.dependencies], ['default', 'default', 'latest'])

        mkdir(srcdir, parents=True)
        inst.configure_step()
        siteconfig = read_file(os.path.join(srcdir, 'siteconfig.py'))
        self.assertIn("mpi_prefix = '/sw/openmpi/5.0.8-ilp64'", siteconfig)
        self.assertIn("blas_library_dirs = ['/sw/openblas/0.3.28-ilp64/lib']", siteconfig)
        self.assertIn("libxc_prefix = '/sw/libxc/7.0.0'", siteconfig)

        # existing siteconfig.py is left alone
        write_file(os.path.join(srcdir, 'siteconfig.py'), "mpi = False\n")
        inst.configure_step()
        self.assertEqual(read_file(os.path.join(srcdir, 'siteconfig.py')), "mpi = False\n")

        inst.build_step()
        inst.install_step()
        cmds = [cmd for (_, cmd, _) in self.cmds]
        self.assertEqual(cmds[0], 'uv venv %s' % venv)
        self.assertIn('uv pip install numpy scipy ase mpi4py matplotlib', cmds)
        self.assertIn('uv pip install -vv --no-build-isolation --no-binary=gpaw .', cmds)
        self.assertIn('gpaw install-data %s' % os.path.join(inst.installdir, 'share'), cmds)
        self.assertEqual(cmds[-1], 'uv pip freeze > %s' % os.path.join(inst.installdir, 'requirements.txt'))

        # virtual environment is only added to $PATH once
        env = inst.build_env()
        self.assertEqual(env['VIRTUAL_ENV'], venv)
        self.assertTrue(env['PATH'].startswith(os.path.join(venv, 'bin') + os.pathsep))
        os.environ['PATH'] = env['PATH']
        self.assertEqual(inst.build_env()['PATH'], env['PATH'])

        inst = get_installer_class('gpaw')(options={'precision': 'ilp32'}, buildpath=self.buildpath,
                                           sourcepath=self.sourcepath, silent=True)
        self.assertErrorRegex(ValidationError, "Precision must be one of lp64, ilp64, found 'ilp32'",
                              inst.validate_step)

    def test_molden(self):
        """Test MOLDEN installer."""
        for cmd in ['gfortran', 'make']:
            install_fake_command(cmd, OK_SCRIPT, self.bindir)
        install_fake_command('pkg-config', "#!/bin/bash\nexit 1\n", self.bindir)

        inst = self.prepare('molden')
        self.mock_stderr(True)
        inst.check_deps_step()
        stderr = self.get_stderr()
        self.mock_stderr(False)
        self.assertIn("x11 development libraries not found (X11-based visualization may be limited)", stderr)
        self.assertIn("gl development libraries not found (gmolden graphical features may be limited)", stderr)

        inst.build_step()
        self.assertEqual(self.cmds[0][1], 'make -j 4 FC=gfortran')

        srcdir = os.path.join(self.sourcepath, 'molden-7.3')
        mkdir(inst.installdir, parents=True)
        create_source_tree(srcdir, {'makefile': ''})
        self.assertErrorRegex(EasyBuildError, "None of the MOLDEN executables", inst.install_step)

        create_source_tree(srcdir, {'gmolden': 'gmolden', 'molden': 'molden'})
        inst.install_step()
        self.assertEqual(sorted(os.listdir(os.path.join(inst.installdir, 'bin'))), ['gmolden', 'molden'])
        inst.sanity_check_step()

    def test_std2(self):
        """Test std2 installer."""
        srcdir = os.path.join(self.sourcepath, 'std2-2.0.1')
        upstream = create_source_tree(os.path.join(self.tmpdir, 'libcint'), {'CMakeLists.txt': ''})
        git_log = self.install_fake_git(src=upstream)

        inst = self.prepare('std2')
        inst.configure_step()
        self.assertEqual(read_file(git_log).strip(),
                         "clone --depth 1 --branch master https://github.com/sunqm/libcint.git %s/libcint" % srcdir)
        self.assertTrue(os.path.exists(os.path.join(srcdir, 'libcint', 'CMakeLists.txt')))

        # libcint is only cloned when it's not there yet
        write_file(git_log, '')
        inst.configure_step()
        self.assertEqual(read_file(git_log), '')

        inst.build_step()
        inst.install_step()
        opts = 'PREFIX=%s FC=gfortran' % inst.installdir
        self.assertEqual([cmd for (_, cmd, _) in self.cmds], ['make -j 4 %s' % opts, 'make %s install' % opts])

    def test_xtb4stda(self):
        """Test xtb4stda installer."""
        for cmd in ['make', 'ruby']:
            install_fake_command(cmd, OK_SCRIPT, self.bindir)
        self.install_fake_git()

        setvars = os.path.join(self.tmpdir, 'nosuchdir', 'setvars.sh')
        inst = self.prepare('xtb4stda', options={'oneapi_setvars': setvars})
        self.assertErrorRegex(DependencyMissingError, "Intel oneAPI not found, %s does not exist" % setvars,
                              inst.check_deps_step)

        setvars = os.path.join(self.tmpdir, 'setvars.sh')
        write_file(setvars, '')
        inst = self.prepare('xtb4stda', options={'oneapi_setvars': setvars})
        inst.check_deps_step()

        inst.build_step()
        self.assertEqual(self.cmds, [('make', "source %s --force > /dev/null 2>&1; make FC=ifx CC=icx" % setvars,
                                      os.path.join(self.sourcepath, 'xtb4stda-1.1.1'))])
        self.assertIn("source %s --force" % setvars, inst.dependencies_notes % inst.template_values())

    def test_binary_packages(self):
        """Test installers for packages that come in binary form."""
        inst = self.prepare('gxtb')
        create_source_tree(inst.srcdir, {
            'binary/gxtb': '#!/bin/bash',
            'parameters/gxtb.param': 'params',
            'README.md': 'readme',
        })
        mkdir(inst.installdir, parents=True)
        inst.configure_step()
        inst.build_step()
        inst.install_step()
        self.assertEqual(sorted(os.listdir(inst.installdir)), ['gxtb', 'parameters'])
        self.assertEqual(read_file(os.path.join(inst.installdir, 'parameters', 'gxtb.param')), 'params')
        inst.sanity_check_step()
        self.assertEqual(self.cmds, [])

        # everything is copied if no specific files are specified
        inst = self.prepare('xtb')
        create_source_tree(inst.srcdir, {'bin/xtb': '#!/bin/bash', 'share/xtb/param_gfn2-xtb.txt': 'params'})
        inst.install_step()
        inst.sanity_check_step()
        self.assertEqual(inst.source_url % inst.template_values(),
                         'https://github.com/grimme-lab/xtb/releases/download/v6.7.1/xtb-6.7.1-linux-x86_64.tar.xz')


def suite():
    """ returns all the testcases in this module """
    return TestLoader().loadTestsFromTestCase(InstallerSpecificTest)


if __name__ == '__main__':
    res = TextTestRunner(verbosity=1).run(suite())
    sys.exit(len(res.failures))
