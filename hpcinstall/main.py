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
Command line interface: hpc-install <package> [<version> [<variant or symlink name>]] [options]
"""
import argparse
import os
import sys
import tempfile

from easybuild.base import fancylogger
from easybuild.tools.build_log import EasyBuildError, init_logging, print_msg, stop_logging

from hpcinstall.framework.config import BUILDPATH_ENV_VAR, SOURCEPATH_ENV_VAR, init_easybuild_config
from hpcinstall.installers import avail_installers, get_installer_class

_log = fancylogger.getLogger('hpcinstall.main', fname=False)


def option_flag(key):
    """Command line flag for a package-specific option."""
    return '--%s' % key.replace('_', '-')


def add_package_parser(subparsers, installer_class):
    """Add subcommand for the given installer, with its package-specific options."""
    parser = subparsers.add_parser(installer_class.name, help=installer_class.description,
                                   description=installer_class.description)

    parser.add_argument('version_pos', nargs='?', metavar='VERSION',
                        help="version to install: a release (e.g. %s) or a git ref (default: %s)" %
                        (installer_class.default_version, installer_class.default_version))
    if installer_class.variants:
        qualifier_help = "variant to install, one of %s (default: %s)" % (', '.join(installer_class.variants),
                                                                          installer_class.default_variant)
    else:
        qualifier_help = "name of symlink to the installation (default: %s)" % installer_class.default_symlink_name
    parser.add_argument('qualifier', nargs='?', metavar='QUALIFIER', help=qualifier_help)

    parser.add_argument('--version', dest='version_opt', metavar='VER', help="version to install")
    parser.add_argument('--dev', action='store_true',
                        help="install development version (git ref '%s')" % installer_class.dev_ref)
    parser.add_argument('--symlink-name', metavar='NAME',
                        help="name of symlink to the installation (default: %s)" %
                        installer_class.default_symlink_name)

    for key, (default, descr, _) in sorted(installer_class.extra_options().items()):
        if isinstance(default, bool):
            parser.add_argument(option_flag(key), dest='opt_%s' % key, action='store_true', default=None,
                                help=descr)
        else:
            parser.add_argument(option_flag(key), dest='opt_%s' % key, metavar='VALUE', default=None,
                                help="%s (default: %s)" % (descr, default))

    return parser


def create_parser():
    """Create parser for command line arguments."""
    parser = argparse.ArgumentParser(prog='hpc-install',
                                     description="Build and install scientific software into versioned directories")
    parser.add_argument('--buildpath', help="build root (default: $%s or ~/software/build)" % BUILDPATH_ENV_VAR)
    parser.add_argument('--sourcepath',
                        help="source root (default: $%s or ~/software/src/external)" % SOURCEPATH_ENV_VAR)
    parser.add_argument('--parallel', type=int, metavar='N', help="number of parallel build jobs")
    parser.add_argument('--debug', action='store_true', help="enable debug logging")
    parser.add_argument('--logfile', help="log to this file (kept after a successful installation)")
    parser.add_argument('--no-lock', action='store_true', help="do not lock the package during installation")
    parser.add_argument('--list', action='store_true', help="list available packages")

    subparsers = parser.add_subparsers(dest='package', metavar='PACKAGE')
    for name in avail_installers():
        add_package_parser(subparsers, get_installer_class(name))

    return parser


def list_packages():
    """Print available packages, with their default version and description."""
    for name in avail_installers():
        installer_class = get_installer_class(name)
        print_msg("%-10s %-10s %s", name, installer_class.default_version, installer_class.description,
                  prefix=False)


def det_install_args(args, installer_class):
    """Determine arguments to pass to the installer from the parsed command line arguments."""
    if args.dev:
        version = installer_class.dev_ref
    elif args.version_opt:
        version = args.version_opt
    else:
        version = args.version_pos

    variant, symlink_name = None, args.symlink_name
    if args.qualifier is not None:
        if installer_class.variants:
            variant = args.qualifier
        elif symlink_name is None:
            symlink_name = args.qualifier

    options = {}
    for key in installer_class.extra_options():
        value = getattr(args, 'opt_%s' % key)
        if value is not None:
            options[key] = value

    return {
        'version': version,
        'variant': variant,
        'symlink_name': symlink_name,
        'options': options,
        'buildpath': args.buildpath,
        'sourcepath': args.sourcepath,
        'parallel': args.parallel,
        'use_lock': not args.no_lock,
    }


def install(args, installer_class):
    """Run installation, logging to a (temporary) log file; returns exit code."""
    logfile = args.logfile
    if logfile is None:
        fd, logfile = tempfile.mkstemp(prefix='hpcinstall-%s-' % installer_class.name, suffix='.log')
        os.close(fd)

    init_logging(logfile, silent=True)
    if args.debug:
        fancylogger.setLogLevelDebug()
    else:
        fancylogger.setLogLevelInfo()

    try:
        installer = installer_class(**det_install_args(args, installer_class))
        installer.run()
    except EasyBuildError as err:
        _log.error("Installation of %s failed: %s", installer_class.name, err.msg)
        stop_logging(logfile)
        sys.stderr.write("Error: %s\n" % err.msg)
        sys.stderr.write("See log file %s for details\n" % logfile)
        return 1

    stop_logging(logfile)
    if args.logfile is None:
        os.remove(logfile)

    return 0


def main(args=None):
    """Main function: parse command line arguments, and install the selected package."""
    parser = create_parser()
    args = parser.parse_args(args)

    if args.list:
        list_packages()
        return 0

    if args.package is None:
        parser.error("no package specified (use --list to see the available packages)")

    try:
        init_easybuild_config()
    except EasyBuildError as err:
        sys.stderr.write("Error: %s\n" % err.msg)
        return 1

    return install(args, get_installer_class(args.package))


if __name__ == '__main__':
    sys.exit(main())
