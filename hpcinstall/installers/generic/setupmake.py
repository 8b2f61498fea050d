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
General installer for software that is configured with a bundled 'setup' script
(a wrapper around CMake that creates the build directory), and then built with make
in that build directory.
"""
import shlex

from hpcinstall.framework.installer import Installer


class SetupMake(Installer):
    """Support for software configured via ./setup <build dir>, and built in place with make."""

    required_tools = ['cmake', 'make']

    def det_setupopts(self):
        """Extra options to pass to the setup script."""
        return []

    @property
    def setup_target(self):
        """Directory the setup script creates the build tree in."""
        return self.builddir

    def configure_step(self):
        """Run setup script in source directory."""
        cmd = ['./setup'] + self.det_setupopts() + [shlex.quote(self.setup_target)]
        self.run_cmd('setup', ' '.join(cmd), work_dir=self.srcdir)

    def build_step(self):
        """Build with make in the build directory created by the setup script."""
        self.run_cmd('make', 'make %s' % self.parallel_flag, work_dir=self.setup_target)

    def install_step(self):
        """Nothing to install, the software is used from the build directory."""
        pass
