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
Cache of source archives: sources are only downloaded (or cloned) when no archive for them
is available in the source root yet, and after a successful install the source tree is
packed up into that archive again before it is removed.
"""
import os
import shlex
import tempfile

from easybuild.base import fancylogger
from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.filetools import change_dir, download_file, extract_cmd, mkdir, move_file, remove_dir
from easybuild.tools.filetools import remove_file
from easybuild.tools.run import RunShellCmdError, run_shell_cmd

from hpcinstall.framework.errors import FetchError, warn_best_effort

# tar compression flag to use per archive extension
TAR_COMPRESSION_FLAGS = {
    '.tar': '',
    '.tar.bz2': 'j',
    '.tar.gz': 'z',
    '.tar.xz': 'J',
    '.tgz': 'z',
}

# suffix of archive while it is being created
PARTIAL_SUFFIX = '.partial'

_log = fancylogger.getLogger('hpcinstall.archive', fname=False)


def det_tar_flags(archive_name):
    """Determine flags to pass to 'tar' to create the specified archive; returns None for unsupported types."""
    for ext, flag in sorted(TAR_COMPRESSION_FLAGS.items(), key=lambda x: len(x[0]), reverse=True):
        if archive_name.endswith(ext):
            return '-c%sf' % flag
    return None


def extract_archive(archive_path, target_dir, log=None):
    """
    Extract archive to target_dir.

    If the archive holds a single top-level directory (as source tarballs usually do),
    the contents of that directory end up in target_dir.
    """
    if log is None:
        log = _log

    parent_dir = os.path.dirname(target_dir)
    mkdir(parent_dir, parents=True)
    tmpdir = tempfile.mkdtemp(prefix='.extract-', dir=parent_dir)
    cwd = os.getcwd()

    try:
        # command derived from file extension does not quote the path to the archive
        path = os.path.abspath(archive_path)
        cmd = extract_cmd(path).replace(path, shlex.quote(path), 1)
        res = run_shell_cmd(cmd, fail_on_error=False, hidden=True, work_dir=tmpdir)
        if res.exit_code:
            raise FetchError("Failed to extract %s (exit code %s): %s", archive_path, res.exit_code,
                             res.output.strip())
        entries = [x for x in os.listdir(tmpdir) if x not in (os.curdir, os.pardir)]
        if len(entries) == 1 and os.path.isdir(os.path.join(tmpdir, entries[0])):
            move_file(os.path.join(tmpdir, entries[0]), target_dir)
        else:
            move_file(tmpdir, target_dir)
    except FetchError:
        raise
    except EasyBuildError as err:
        raise FetchError("Failed to extract %s: %s", archive_path, err.msg)
    except RunShellCmdError as err:
        raise FetchError("Failed to extract %s: %s", archive_path, err)
    finally:
        change_dir(cwd)
        if os.path.exists(tmpdir):
            remove_dir(tmpdir)

    log.info("Extracted %s to %s", archive_path, target_dir)
    return target_dir


def git_clone(git_url, ref, target_dir, recursive=False, shallow=True, log=None):
    """Clone specified ref (branch or tag) of git repository to target_dir."""
    if log is None:
        log = _log

    cmd = ['git', 'clone']
    if recursive:
        cmd.append('--recursive')
    if shallow:
        cmd.extend(['--depth', '1'])
    cmd.extend(['--branch', ref, git_url, target_dir])
    cmd = ' '.join(shlex.quote(x) for x in cmd)

    mkdir(os.path.dirname(target_dir), parents=True)
    try:
        res = run_shell_cmd(cmd, fail_on_error=False, hidden=True)
    except RunShellCmdError as err:
        raise FetchError("Failed to clone %s: %s", git_url, err)

    if res.exit_code:
        if os.path.exists(target_dir):
            remove_dir(target_dir)
        raise FetchError("Failed to clone '%s' of %s (exit code %s): %s",
                         ref, git_url, res.exit_code, res.output.strip())

    log.info("Cloned '%s' of %s to %s", ref, git_url, target_dir)
    return target_dir


def fetch_or_use(cache_dir, archive_name, target_dir, url=None, git_url=None, git_ref=None,
                 git_recursive=False, git_shallow=True, use_cache=True, manual_download_url=None, log=None):
    """
    Make sure the sources are available in target_dir, and return target_dir.

    In order of preference: an existing source tree at target_dir is used as is, the cached archive
    <cache_dir>/<archive_name> is extracted, the git repository is cloned, or the archive is downloaded
    (to the cache) and extracted.

    :param use_cache: consider existing source tree and cached archive (disabled for development versions,
                      which must always be fetched fresh)
    :param manual_download_url: where to get the archive for software that can not be downloaded automatically
    """
    if log is None:
        log = _log

    archive_path = os.path.join(cache_dir, archive_name) if archive_name else None

    if use_cache:
        if os.path.isdir(target_dir):
            log.info("Using existing source tree %s", target_dir)
            return target_dir

        if archive_path and os.path.isfile(archive_path):
            log.info("Using cached source archive %s", archive_path)
            return extract_archive(archive_path, target_dir, log=log)

    if git_url:
        if os.path.exists(target_dir):
            log.info("Removing stale source tree %s", target_dir)
            remove_dir(target_dir)
        return git_clone(git_url, git_ref, target_dir, recursive=git_recursive, shallow=git_shallow, log=log)

    if url and archive_path:
        mkdir(cache_dir, parents=True)
        try:
            path = download_file(archive_name, url, archive_path, max_attempts=1)
        except EasyBuildError as err:
            raise FetchError("Failed to download %s: %s", url, err.msg)
        if path is None:
            remove_file(archive_path)
            raise FetchError("Failed to download %s to %s", url, archive_path)
        return extract_archive(archive_path, target_dir, log=log)

    if manual_download_url:
        raise FetchError("Source archive %s not found, download it from %s and place it in %s",
                         archive_path, manual_download_url, cache_dir)
    raise FetchError("Source archive %s not found, and no location to download it from is known", archive_path)


def archive_and_clean(source_dir, cache_dir, archive_name, replace=False, log=None):
    """
    Pack up source_dir into <cache_dir>/<archive_name> and remove it (both on a best effort basis).

    Archiving is skipped if the archive is already there (e.g. because it was downloaded), unless replace is set.
    The archive is first created under a temporary name, so an existing archive is only replaced by a complete one.
    If archiving fails, the source tree is kept, since it is the only copy of the sources.

    :param replace: replace existing archive (for development versions, of which the sources may have changed)
    :return: path to archive, or None if archiving failed
    """
    if log is None:
        log = _log

    archive_path = os.path.join(cache_dir, archive_name)

    if os.path.exists(archive_path) and not replace:
        log.info("Source archive %s already exists, not archiving %s again", archive_path, source_dir)
    else:
        tar_flags = det_tar_flags(archive_name)
        if tar_flags is None:
            warn_best_effort("Don't know how to create archive %s, keeping source tree %s", archive_name, source_dir,
                             log=log)
            return None

        partial_path = archive_path + PARTIAL_SUFFIX
        cmd = ['tar', tar_flags, partial_path, '-C', os.path.dirname(source_dir), os.path.basename(source_dir)]
        res = run_shell_cmd(' '.join(shlex.quote(x) for x in cmd), fail_on_error=False, hidden=True)
        if res.exit_code:
            warn_best_effort("Failed to archive %s to %s, keeping source tree: %s", source_dir, archive_path,
                             res.output.strip(), log=log)
            remove_file(partial_path)
            return None

        try:
            move_file(partial_path, archive_path)
        except EasyBuildError as err:
            warn_best_effort("Failed to move %s to %s, keeping source tree %s: %s", partial_path, archive_path,
                             source_dir, err.msg, log=log)
            remove_file(partial_path)
            return None
        log.info("Archived %s to %s", source_dir, archive_path)

    try:
        remove_dir(source_dir)
    except EasyBuildError as err:
        warn_best_effort("Failed to remove source tree %s: %s", source_dir, err.msg, log=log)

    return archive_path
