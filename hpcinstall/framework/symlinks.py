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
Management of the symlink selecting the default installation of a package.
"""
import os

from easybuild.base import fancylogger
from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.filetools import remove_file, symlink

from hpcinstall.framework.errors import SymlinkError

_log = fancylogger.getLogger('hpcinstall.symlinks', fname=False)


def point_symlink(link_path, target, log=None):
    """
    (Re)create symlink at link_path so it points to target.

    The existing entry is removed before the new symlink is created (no in-place update),
    so readers may briefly see no symlink at all.
    The target is stored as is, so it should be a name relative to the directory that holds the symlink,
    to keep that directory relocatable.

    :param link_path: location of the symlink
    :param target: relative symlink target (a version directory name)
    :param log: logger to use
    """
    if log is None:
        log = _log

    if not target or os.sep in target:
        raise SymlinkError("Symlink target must be a name in the same directory, found '%s'", target)

    if os.path.isdir(link_path) and not os.path.islink(link_path):
        raise SymlinkError("Not replacing directory %s with a symlink", link_path)

    try:
        remove_file(link_path)
        symlink(target, link_path, use_abspath_source=False)
    except EasyBuildError as err:
        raise SymlinkError("Failed to point %s to %s: %s", link_path, target, err.msg)

    log.info("Symlink %s now points to %s", link_path, target)
    return link_path


def symlink_target(link_path):
    """Return target of the symlink at link_path, or None if there is no symlink."""
    if os.path.islink(link_path):
        return os.readlink(link_path)
    return None
