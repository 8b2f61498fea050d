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
Per-package lock, to serialize installations that share a package root (and its default symlink).
"""
import fcntl
import os
from contextlib import contextmanager

from easybuild.base import fancylogger
from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.filetools import mkdir

from hpcinstall.framework.config import LOCK_FILE_NAME

_log = fancylogger.getLogger('hpcinstall.lock', fname=False)


@contextmanager
def package_lock(package_root, enabled=True):
    """
    Hold an exclusive lock on the package root for the duration of the with block.

    Blocks until any other install of the same package has released the lock.
    """
    if not enabled:
        yield None
        return

    mkdir(package_root, parents=True)
    lock_path = os.path.join(package_root, LOCK_FILE_NAME)

    try:
        fd = os.open(lock_path, os.O_CREAT | os.O_RDWR, 0o644)
    except OSError as err:
        raise EasyBuildError("Failed to open lock file %s: %s", lock_path, err)

    try:
        _log.info("Acquiring lock %s", lock_path)
        fcntl.flock(fd, fcntl.LOCK_EX)
        _log.info("Lock %s acquired", lock_path)
        yield lock_path
    finally:
        fcntl.flock(fd, fcntl.LOCK_UN)
        os.close(fd)
        _log.info("Lock %s released", lock_path)
