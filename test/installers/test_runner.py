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
Unit tests for running build steps and the per-package lock.
"""
import fcntl
import os
import sys
from unittest import TextTestRunner, TestLoader

from hpcinstall.framework.config import LOCK_FILE_NAME
from hpcinstall.framework.errors import BuildError
from hpcinstall.framework.lock import package_lock
from hpcinstall.framework.runner import BuildStep, run_build_step, run_build_steps
from test.installers.utilities import InstallerTestCase


class RunnerTest(InstallerTestCase):
    """Tests for hpcinstall.framework.runner and hpcinstall.framework.lock"""

    def test_run_build_step(self):
        """Test running a single build step."""
        step = BuildStep(name='configure', cmd='echo "configuring with $HPCINSTALL_TEST_VAR"; touch configured',
                         work_dir=self.tmpdir, env={'HPCINSTALL_TEST_VAR': 'foo'})
        out = run_build_step(step)
        self.assertIn("configuring with foo", out)
        self.assertTrue(os.path.exists(os.path.join(self.tmpdir, 'configured')))
        # environment variables remain set for later steps
        self.assertEqual(os.getenv('HPCINSTALL_TEST_VAR'), 'foo')

    def test_run_build_step_failure(self):
        """A non-zero exit code is a BuildError naming the failing step."""
        step = BuildStep(name='make', cmd='echo "compiling foo.c"; echo "error: foo.c:1: oops"; exit 2',
                         work_dir=self.tmpdir)
        error_pattern = r"make step failed: '.*' exited with exit code 2"
        self.assertErrorRegex(BuildError, error_pattern, run_build_step, step)

        with self.assertRaises(BuildError) as cm:
            run_build_step(step)
        self.assertEqual(cm.exception.step, 'make')
        # output of failing command is kept, but not included in the (single line) error message
        self.assertNotIn('\n', cm.exception.msg)
        self.assertEqual(cm.exception.output, "compiling foo.c\nerror: foo.c:1: oops")

        # only the last lines of output are kept
        step = BuildStep(name='make', cmd='for i in $(seq 1 100); do echo "line $i"; done; exit 1',
                         work_dir=self.tmpdir)
        with self.assertRaises(BuildError) as cm:
            run_build_step(step)
        self.assertIn("line 100", cm.exception.output)
        self.assertIn("line 81", cm.exception.output)
        self.assertNotIn("line 80\n", cm.exception.output)

    def test_run_build_steps(self):
        """The first failing step stops the whole sequence."""
        steps = [
            BuildStep(name='configure', cmd='touch configured', work_dir=self.tmpdir),
            BuildStep(name='make', cmd='false', work_dir=self.tmpdir),
            BuildStep(name='make install', cmd='touch installed', work_dir=self.tmpdir),
        ]
        self.assertErrorRegex(BuildError, "^make step failed", run_build_steps, steps)
        self.assertTrue(os.path.exists(os.path.join(self.tmpdir, 'configured')))
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir, 'installed')))

    def test_package_lock(self):
        """Test per-package lock."""
        package_root = os.path.join(self.buildpath, 'openmpi')
        lock_path = os.path.join(package_root, LOCK_FILE_NAME)

        with package_lock(package_root) as res:
            self.assertEqual(res, lock_path)
            self.assertTrue(os.path.isfile(lock_path))

            # lock can not be acquired by anybody else while it is held
            fd = os.open(lock_path, os.O_RDWR)
            try:
                self.assertRaises(OSError, fcntl.flock, fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            finally:
                os.close(fd)

        # lock is released afterwards
        fd = os.open(lock_path, os.O_RDWR)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)

        # disabled lock does not touch the filesystem
        other_root = os.path.join(self.buildpath, 'openblas')
        with package_lock(other_root, enabled=False) as res:
            self.assertEqual(res, None)
        self.assertFalse(os.path.exists(other_root))


def suite():
    """ returns all the testcases in this module """
    return TestLoader().loadTestsFromTestCase(RunnerTest)


if __name__ == '__main__':
    res = TextTestRunner(verbosity=1).run(suite())
    sys.exit(len(res.failures))
