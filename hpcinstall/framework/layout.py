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
Filesystem layout of installations:

  <sourcepath>/<name>-<version>                   (transient) source tree
  <sourcepath>/<name>-<version><ext>              cached source archive
  <buildpath>/<name>/<version>[-<variant>]        installation directory
  <buildpath>/<name>/<version>[-<variant>]/build  build subdirectory (only for some packages)
  <buildpath>/<name>/default                      symlink to the default installation
"""
import os
from collections import namedtuple

from hpcinstall.framework.config import DEFAULT_DEP_VERSION, DEFAULT_SYMLINK_NAME
from hpcinstall.framework.errors import DependencyMissingError, ValidationError

BUILD_SUBDIR_NAME = 'build'

InstallLayout = namedtuple('InstallLayout', ['package_root', 'source_dir', 'build_dir', 'build_subdir'])

# everything an install run needs to know once the version has been resolved;
# assembled once, never modified afterwards
InstallContext = namedtuple('InstallContext', ['name', 'version_spec', 'version', 'variant', 'symlink_name',
                                               'layout', 'archive_name'])

# previously installed package required by another package:
# version_option: name of option that specifies the version to use (default symlink is used if not set)
# variant: variant to use along with a specific version
# optional_option: name of option that disables the dependency when set (e.g. 'serial')
# symlink_name: name of default symlink of the dependency
Dependency = namedtuple('Dependency', ['name', 'version_option', 'variant', 'optional_option', 'symlink_name'])
Dependency.__new__.__defaults__ = (None, None, None, DEFAULT_SYMLINK_NAME)


def check_path_component(value, descr):
    """Make sure value is safe to use as a single path component."""
    if not value:
        raise ValidationError("%s can not be empty", descr)
    if os.sep in value or '/' in value or value in (os.curdir, os.pardir):
        raise ValidationError("%s '%s' can not be used as a directory name", descr, value)


def check_variant(variant, variants):
    """Check whether variant is part of the allowed set of variants."""
    if variants is None:
        if variant is not None:
            raise ValidationError("Variants are not supported, found '%s'", variant)
    elif variant not in variants:
        raise ValidationError("Variant must be one of %s, found '%s'", ', '.join(variants), variant)


def det_version_dirname(version, variant=None):
    """Name of the installation directory for given version and (optional) variant."""
    check_path_component(version, "Version")
    if variant is None:
        return version

    check_path_component(variant, "Variant")
    return '%s-%s' % (version, variant)


def det_archive_name(name, version, ext):
    """Canonical name of cached source archive."""
    return '%s-%s%s' % (name, version, ext)


def det_install_layout(name, version, buildpath, sourcepath, variant=None, build_subdir=False):
    """
    Determine paths used for installing given version of a package.

    This is a pure function, nothing is checked or created on disk.

    :param name: package name
    :param version: resolved version
    :param buildpath: build root
    :param sourcepath: source root
    :param variant: variant (e.g. 'lp64') to append to the version
    :param build_subdir: whether or not a separate build directory is used inside the installation directory
    """
    check_path_component(name, "Package name")
    dirname = det_version_dirname(version, variant=variant)

    package_root = os.path.join(buildpath, name)
    build_dir = os.path.join(package_root, dirname)

    return InstallLayout(
        package_root=package_root,
        source_dir=os.path.join(sourcepath, '%s-%s' % (name, version)),
        build_dir=build_dir,
        build_subdir=os.path.join(build_dir, BUILD_SUBDIR_NAME) if build_subdir else None,
    )


def install_hint(name, version=DEFAULT_DEP_VERSION, variant=None):
    """Command to install (a version of) a package."""
    cmd = ['hpc-install', name]
    if version != DEFAULT_DEP_VERSION:
        cmd.append(version)
        if variant:
            cmd.append(variant)
    return ' '.join(cmd)


def locate_dependency(buildpath, name, version=DEFAULT_DEP_VERSION, variant=None,
                      symlink_name=DEFAULT_SYMLINK_NAME):
    """
    Locate installation of a package another package depends on.

    For the 'default' version, the symlink in the package root is followed,
    otherwise the <version>[-<variant>] directory is used.

    :return: path to installation directory (with default symlink resolved)
    """
    package_root = os.path.join(buildpath, name)

    if version == DEFAULT_DEP_VERSION:
        link_path = os.path.join(package_root, symlink_name)
        if os.path.islink(link_path) and os.path.isdir(link_path):
            return os.path.join(package_root, os.readlink(link_path))
        expected = link_path
    else:
        path = os.path.join(package_root, det_version_dirname(version, variant=variant))
        if os.path.isdir(path):
            return path
        expected = path

    raise DependencyMissingError("%s not found at %s (install it with: %s)",
                                 name, expected, install_hint(name, version=version, variant=variant))
