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
Running of the (opaque) commands that configure, build and install a package.

Every command is run exactly once, only its exit code determines whether it succeeded.
"""
from collections import namedtuple

import easybuild.tools.environment as env
from easybuild.base import fancylogger
from easybuild.tools.run import RunShellCmdError, run_shell_cmd

from hpcinstall.framework.errors import BuildError

BuildStep = namedtuple('BuildStep', ['name', 'cmd', 'work_dir', 'env'])
BuildStep.__new__.__defaults__ = (None, None)

# number of lines of output of a failing command to keep
OUTPUT_TAIL_LINES = 20

_log = fancylogger.getLogger('hpcinstall.runner', fname=False)


def run_build_step(step, log=None):
    """
    Run a single build step; raises BuildError (naming the step) if it fails.

    Environment variables specified for the step are set in the environment of the current process,
    so they are also visible to later steps.

    :return: output of the command
    """
    if log is None:
        log = _log

    for key, value in sorted((step.env or {}).items()):
        env.setvar(key, value, verbose=False)

    log.info("Running %s step: %s (in %s)", step.name, step.cmd, step.work_dir)
    try:
        res = run_shell_cmd(step.cmd, fail_on_error=False, work_dir=step.work_dir)
    except RunShellCmdError as err:
        raise BuildError("%s step failed: %s", step.name, err, step=step.name)

    if res.exit_code:
        tail = '\n'.join(res.output.strip().split('\n')[-OUTPUT_TAIL_LINES:])
        log.error("%s step failed, last lines of output:\n%s", step.name, tail)
        raise BuildError("%s step failed: '%s' exited with exit code %s", step.name, step.cmd, res.exit_code,
                         step=step.name, output=tail)

    return res.output


def run_build_steps(steps, log=None):
    """Run build steps in order, stopping at the first one that fails."""
    for step in steps:
        run_build_step(step, log=log)
