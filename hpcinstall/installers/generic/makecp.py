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
General installer for software that is built with make but has no 'make install',
so the resulting files are copied into the installation directory.
"""
import glob
import os
import stat

from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.filetools import adjust_permissions, copy_dir, copy_file, mkdir

from hpcinstall.installers.generic.configuremake import ConfigureMake


def copy_files(files_to_copy, srcdir, installdir, log):
    """
    Copy files and directories from srcdir to installdir.

    :param files_to_copy: list of entries, either a file/dir pattern (copied to the top of installdir),
                          or a ([<patterns>], <target subdir>) tuple
    """
    for fil in files_to_copy:
        if isinstance(fil, tuple):
            # ([src1, src2], targetdir)
            if len(fil) == 2 and isinstance(fil[0], list) and isinstance(fil[1], str):
                files_specs = fil[0]
                target = os.path.join(installdir, fil[1])
            else:
                raise EasyBuildError("Only tuples of format '([<source files>], <target dir>)' supported.")
        elif isinstance(fil, str):
            files_specs = [fil]
            target = installdir
        else:
            raise EasyBuildError("Found neither string nor tuple as file to copy: '%s' (type %s)", fil, type(fil))

        mkdir(target, parents=True)

        for files_spec in files_specs:
            filepaths = glob.glob(os.path.join(srcdir, files_spec))
            log.debug("List of files matching '%s' in %s: %s", files_spec, srcdir, filepaths)

            # there should be at least one match per file spec
            if not filepaths:
                raise EasyBuildError("No files matching '%s' found in %s", files_spec, srcdir)

            for filepath in filepaths:
                if os.path.isfile(filepath):
                    log.debug("Copying file %s to %s", filepath, target)
                    copy_file(filepath, target)
                elif os.path.isdir(filepath):
                    fulltarget = os.path.join(target, os.path.basename(filepath))
                    log.debug("Copying directory %s to %s", filepath, fulltarget)
                    copy_dir(filepath, fulltarget, symlinks=True, dirs_exist_ok=True)
                else:
                    raise EasyBuildError("Can't copy non-existing path %s to %s", filepath, target)


def fix_executables(installdir, executables):
    """Make sure the specified files (relative to installdir) are executable."""
    for exe in executables:
        adjust_permissions(os.path.join(installdir, exe), stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH, add=True)


class MakeCp(ConfigureMake):
    """
    Software with no configure and no make install step.
    """

    # list of files or dirs to copy, see copy_files
    files_to_copy = []
    # copied files that must be executable
    executables_to_fix = []

    def configure_step(self):
        """No configure step."""
        pass

    def install_step(self):
        """Install by copying specified files and directories."""
        self.log.debug("Starting install_step with files_to_copy: %s", self.files_to_copy)
        copy_files(self.files_to_copy, self.srcdir, self.installdir, self.log)
        fix_executables(self.installdir, self.executables_to_fix)
