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
Errors raised while installing a package.

All of these are fatal: they abort the install run with a non-zero exit code.
Failures of best-effort steps (archiving the source tree, removing it) are only
reported through warn_best_effort and never change the outcome of a run.
"""
from easybuild.tools.build_log import EasyBuildError, print_warning


class ValidationError(EasyBuildError):
    """Bad command line input: empty version, unknown variant, unsafe path component."""


class DependencyMissingError(EasyBuildError):
    """A required tool or previously installed package is not available."""


class FetchError(EasyBuildError):
    """Failed to obtain the sources (download, clone or extraction)."""


class BuildError(EasyBuildError):
    """A configure, build or install command failed."""

    def __init__(self, msg, *args, **kwargs):
        """Keep track of the name of the failing step, and the last lines of output of the failing command."""
        self.step = kwargs.pop('step', None)
        self.output = kwargs.pop('output', None)
        super(BuildError, self).__init__(msg, *args, **kwargs)


class SymlinkError(EasyBuildError):
    """The symlink selecting the default version could not be (re)created."""


def warn_best_effort(msg, *args, **kwargs):
    """
    Report failure of a best-effort step.

    :param log: logger to also log the warning to
    """
    log = kwargs.pop('log', None)
    if args:
        msg = msg % args
    print_warning(msg, log=log)
