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
Support for determining the version an install run uses on disk.

A version token given on the command line is either a release (starts with a digit),
which is used verbatim, or a development reference (branch name, 'dev', ...),
for which the version is discovered from metadata in the fetched source tree.
"""
import os
import re
from collections import namedtuple
from datetime import datetime

from easybuild.base import fancylogger
from easybuild.tools.build_log import EasyBuildError
from easybuild.tools.filetools import read_file

from hpcinstall.framework.errors import ValidationError

DEV_SUFFIX = '-dev'

RELEASE_REGEX = re.compile(r'^[0-9]')

Release = namedtuple('Release', ['version'])
Development = namedtuple('Development', ['ref'])

# a version probe is a file (relative to the top of the source tree) plus a regular expression,
# of which the first group is the declared version; no regex means the whole file is the version
VersionProbe = namedtuple('VersionProbe', ['path', 'regex'])

VERSION_FILE_PROBE = VersionProbe('VERSION', None)
CMAKE_PROBE = VersionProbe('CMakeLists.txt', re.compile(r'project\s*\([^)]*?\bVERSION\s+([^\s)]+)', re.I | re.S))
SETUP_PY_PROBE = VersionProbe('setup.py', re.compile(r'''\bversion\s*=\s*['"]([^'"]+)['"]'''))
PYPROJECT_PROBE = VersionProbe('pyproject.toml', re.compile(r'''^version\s*=\s*['"]([^'"]+)['"]''', re.M))

DEFAULT_VERSION_PROBES = [VERSION_FILE_PROBE, CMAKE_PROBE, SETUP_PY_PROBE, PYPROJECT_PROBE]

_log = fancylogger.getLogger('hpcinstall.version', fname=False)


def parse_version_token(token):
    """
    Turn version token into either a Release or a Development version spec.

    An empty token is never acceptable, since it would end up as an empty path component.
    """
    if token is None or not token.strip():
        raise ValidationError("Version can not be empty")

    if RELEASE_REGEX.match(token):
        return Release(token)
    return Development(token)


def is_development(version_spec):
    """Check whether given version spec denotes a development reference."""
    return isinstance(version_spec, Development)


def version_token(version_spec):
    """Return the version token the given version spec was created from."""
    if is_development(version_spec):
        return version_spec.ref
    return version_spec.version


def probe_version(srcdir, probe):
    """Try to determine declared version from source tree via the given probe; returns None if not found."""
    path = os.path.join(srcdir, probe.path)
    if not os.path.isfile(path):
        return None

    try:
        txt = read_file(path)
    except EasyBuildError as err:
        _log.warning("Failed to read %s, ignoring it: %s", path, err.msg)
        return None

    if probe.regex is None:
        # version files may be wrapped over several lines
        version = ''.join(txt.split())
    else:
        res = probe.regex.search(txt)
        version = res.group(1).strip() if res else None

    return version or None


def det_dev_version(srcdir, probes=None, now=None):
    """
    Determine version for a development version of the sources in srcdir.

    The probes are tried in order, the first one yielding a non-empty version wins;
    '-dev' is appended to it. If no probe yields a version, <year>.<month>-dev is used.
    """
    if probes is None:
        probes = DEFAULT_VERSION_PROBES

    for probe in probes:
        version = probe_version(srcdir, probe)
        if version:
            _log.info("Found version '%s' in %s", version, os.path.join(srcdir, probe.path))
            return version + DEV_SUFFIX

    if now is None:
        now = datetime.now()
    version = now.strftime('%Y.%m') + DEV_SUFFIX
    _log.info("No declared version found in %s, using %s", srcdir, version)
    return version


def resolve_version(version_spec, srcdir=None, probes=None):
    """
    Resolve version spec into the version to use on disk.

    :param version_spec: Release or Development version spec (see parse_version_token)
    :param srcdir: fetched source tree; only required (and only accessed) for development versions
    :param probes: version probes to use for development versions
    """
    if is_development(version_spec):
        if srcdir is None:
            raise EasyBuildError("Source directory is required to resolve development version '%s'",
                                 version_spec.ref)
        return det_dev_version(srcdir, probes=probes)

    return version_spec.version
