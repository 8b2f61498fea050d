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
General installer for software that uses the GNU installation procedure,
i.e. configure/make/make install.
"""
import os
import shlex

from hpcinstall.framework.installer import Installer


class ConfigureMake(Installer):
    """
    Support for building and installing applications with configure/make/make install
    """

    # location of configure script, relative to the source directory
    configure_cmd = './configure'
    # command that generates the configure script, only run when it is missing (e.g. in a git checkout)
    bootstrap_cmd = None
    required_tools = ['make']

    def det_configopts(self):
        """Extra options to pass to the configure script."""
        return []

    def det_buildopts(self):
        """Extra options to pass to 'make'."""
        return []

    def det_installopts(self):
        """Extra options to pass to 'make install'."""
        return []

    def configure_step(self):
        """
        Configure step
        - typically ./configure --prefix=/install/path style
        """
        if self.bootstrap_cmd and not os.path.exists(os.path.join(self.srcdir, self.configure_cmd)):
            self.run_cmd('bootstrap', self.bootstrap_cmd)

        cmd = [self.configure_cmd, shlex.quote('--prefix=%s' % self.installdir)] + self.det_configopts()
        self.run_cmd('configure', ' '.join(cmd))

    def build_step(self):
        """
        Build step
        - typically make -j X
        """
        cmd = ['make', self.parallel_flag] + self.det_buildopts()
        self.run_cmd('make', ' '.join(cmd))

    def install_step(self):
        """
        Install step
        - typically make install
        """
        cmd = ['make'] + self.det_installopts() + ['install']
        self.run_cmd('make install', ' '.join(cmd))
