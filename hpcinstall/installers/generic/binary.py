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
General installer for software that comes in binary form.
"""
from easybuild.tools.filetools import copy_dir

from hpcinstall.framework.installer import Installer
from hpcinstall.installers.generic.makecp import copy_files, fix_executables


class Binary(Installer):
    """
    Support for installing software that comes in binary form.
    Just copy the sources to the install dir, or only the specified files.
    """

    # list of files or dirs to copy (see copy_files); everything is copied if None
    files_to_copy = None
    executables_to_fix = []

    def configure_step(self):
        """No configuration, this is binary software"""
        pass

    def build_step(self):
        """No compilation, this is binary software"""
        pass

    def install_step(self):
        """Copy all files in source directory (or only the specified ones) to the install directory"""
        if self.files_to_copy is None:
            self.log.info("Copying %s to %s", self.srcdir, self.installdir)
            copy_dir(self.srcdir, self.installdir, symlinks=True, dirs_exist_ok=True)
        else:
            copy_files(self.files_to_copy, self.srcdir, self.installdir, self.log)

        fix_executables(self.installdir, self.executables_to_fix)
