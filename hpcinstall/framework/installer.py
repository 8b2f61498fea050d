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
Generic installation procedure, shared by all installers.

An install run goes through these steps, in order:

  validate    check version, variant, symlink name and options
  check_deps  check required tools and previously installed dependencies
  resolve     determine the version to use on disk (fetches the sources first for development versions)
  source      make the sources available (cached archive, download or clone)
  configure   package-specific, implemented by the installers
  build       package-specific
  install     package-specific, installs into the installation directory
  archive     pack up the source tree into the source cache, and remove it (best effort)
  symlink     point the default symlink to the new installation
  verify      check that the expected files are there

The first failing step aborts the run.
"""
import os
from contextlib import ExitStack

from easybuild.base import fancylogger
from easybuild.tools.build_log import EasyBuildError, print_msg
from easybuild.tools.config import IGNORE
from easybuild.tools.filetools import mkdir, move_file, remove_dir, remove_file, which, write_file
from easybuild.tools.run import RunShellCmdError

from hpcinstall.framework import config
from hpcinstall.framework.archive import archive_and_clean, fetch_or_use
from hpcinstall.framework.errors import BuildError, DependencyMissingError, FetchError, SymlinkError, ValidationError
from hpcinstall.framework.errors import warn_best_effort
from hpcinstall.framework.layout import InstallContext, check_path_component, check_variant, det_archive_name
from hpcinstall.framework.layout import det_install_layout, det_version_dirname, locate_dependency
from hpcinstall.framework.lock import package_lock
from hpcinstall.framework.runner import BuildStep, run_build_step
from hpcinstall.framework.symlinks import point_symlink
from hpcinstall.framework.version import DEFAULT_VERSION_PROBES, is_development, parse_version_token
from hpcinstall.framework.version import resolve_version, version_token

# states of an install run
START = 'START'
ARGS_PARSED = 'ARGS_PARSED'
DEPS_CHECKED = 'DEPS_CHECKED'
VERSION_RESOLVED = 'VERSION_RESOLVED'
SOURCE_READY = 'SOURCE_READY'
CONFIGURED = 'CONFIGURED'
BUILT = 'BUILT'
INSTALLED = 'INSTALLED'
ARCHIVED = 'ARCHIVED'
SYMLINKED = 'SYMLINKED'
VERIFIED = 'VERIFIED'
FAILED = 'FAILED'

VALIDATE_STEP = 'validate'
CHECK_DEPS_STEP = 'check_deps'
RESOLVE_STEP = 'resolve'
SOURCE_STEP = 'source'
CONFIGURE_STEP = 'configure'
BUILD_STEP = 'build'
INSTALL_STEP = 'install'
ARCHIVE_STEP = 'archive'
SYMLINK_STEP = 'symlink'
VERIFY_STEP = 'verify'

# error to report failures of the easybuild-framework helpers with, per step
STEP_ERRORS = {
    VALIDATE_STEP: ValidationError,
    CHECK_DEPS_STEP: DependencyMissingError,
    RESOLVE_STEP: FetchError,
    SOURCE_STEP: FetchError,
    SYMLINK_STEP: SymlinkError,
}
TAXONOMY_ERRORS = (ValidationError, DependencyMissingError, FetchError, BuildError, SymlinkError)

DEPENDENCIES_NOTES_FILE = 'DEPENDENCIES.txt'

# states from which the new installation is complete
INSTALLED_STATES = (INSTALLED, ARCHIVED, SYMLINKED, VERIFIED)
# steps after which the new installation is complete
POST_INSTALL_STEPS = (ARCHIVE_STEP, SYMLINK_STEP, VERIFY_STEP)

# suffix of previous installation of a development version while it is being rebuilt
PREVIOUS_SUFFIX = '.previous'


def det_template_values(name, version):
    """Determine template values for the given name and version, e.g. to complete source URLs."""
    parts = version.split('.')
    return {
        'name': name,
        'version': version,
        'version_major': parts[0],
        'version_major_minor': '.'.join(parts[:2]),
        'version_dashes': version.replace('.', '-'),
    }


class Installer(object):
    """
    Generic support for installing a package into a versioned directory under the build root.

    Package-specific installers declare what to fetch, what to check and how to verify
    the installation through class attributes, and implement configure_step, build_step and install_step.
    """

    name = None
    description = None
    default_version = None
    # git ref to install for --dev
    dev_ref = 'main'

    # allowed variants (None if package has no variants)
    variants = None
    default_variant = None
    default_symlink_name = config.DEFAULT_SYMLINK_NAME

    # template for URL of source archive
    source_url = None
    source_ext = '.tar.gz'
    git_url = None
    # template for git ref corresponding to a release
    git_ref = 'v%(version)s'
    git_recursive = False
    git_shallow = True
    # template for URL of source archive of a development version, for packages without git repository
    dev_url = None
    # where to get sources that can not be downloaded automatically
    manual_download_url = None

    required_tools = []
    dependencies = []

    # whether to build in a 'build' subdirectory of the installation directory
    build_in_subdir = False

    version_probes = DEFAULT_VERSION_PROBES

    # files/dirs/executables (relative to installation directory) that must be present after installation;
    # a tuple means that one of the listed paths must be present
    sanity_check_paths = {}

    # lines printed after a successful installation (templates: installdir, package_root, symlink)
    env_hints = []

    # text written to DEPENDENCIES.txt in the installation directory (templates as for env_hints)
    dependencies_notes = None

    @staticmethod
    def extra_options(extra_vars=None):
        """
        Package-specific options, as a dict with lists of [default, help, category] as values.
        """
        if extra_vars is None:
            extra_vars = {}
        return dict(extra_vars)

    def __init__(self, version=None, variant=None, symlink_name=None, options=None, buildpath=None, sourcepath=None,
                 parallel=None, use_lock=True, silent=False):
        """
        Initialise installer.

        :param version: version token (defaults to default version of package)
        :param variant: variant to install (defaults to default variant of package)
        :param symlink_name: name of symlink to point to installation (defaults to 'default')
        :param options: values for package-specific options (see extra_options)
        :param buildpath: build root
        :param sourcepath: source root
        :param parallel: number of parallel build jobs
        :param use_lock: whether or not to lock the package root during installation
        :param silent: whether or not to suppress progress messages
        """
        self.log = fancylogger.getLogger(self.__class__.__name__, fname=False)

        self.version_token = self.default_version if version is None else version
        self.variant = self.default_variant if variant is None else variant
        self.symlink_name = self.default_symlink_name if symlink_name is None else symlink_name

        self.options = dict(options or {})
        self.cfg = {}

        self.buildpath = config.buildpath(buildpath)
        self.sourcepath = config.sourcepath(sourcepath)
        self.parallel = parallel or config.default_parallel()
        self.use_lock = use_lock
        self.silent = silent

        self.version_spec = None
        self.ctx = None
        self.deps = {}
        self.staging_dir = None

        self.state = START
        self.failed_step = None
        self._exit_stack = None

    @property
    def package_root(self):
        """Directory holding all installations of this package."""
        return os.path.join(self.buildpath, self.name)

    @property
    def installdir(self):
        """Installation directory, only known after version has been resolved."""
        return self.ctx.layout.build_dir

    @property
    def srcdir(self):
        """Source directory, only known after version has been resolved."""
        return self.ctx.layout.source_dir

    @property
    def builddir(self):
        """Directory to build in: 'build' subdirectory of installation directory, or the source directory."""
        return self.ctx.layout.build_subdir or self.ctx.layout.source_dir

    @property
    def parallel_flag(self):
        """Flag to pass to make & co. to build in parallel."""
        return '-j %d' % self.parallel

    @property
    def version(self):
        """Resolved version."""
        return self.ctx.version

    def template_values(self):
        """Values available to templates in source URLs, git refs and environment hints."""
        res = det_template_values(self.name, self.ctx.version if self.ctx else version_token(self.version_spec))
        if self.ctx:
            res.update({
                'installdir': self.installdir,
                'package_root': self.package_root,
                'symlink': os.path.join(self.package_root, self.symlink_name),
            })
        return res

    def get_steps(self):
        """Return list of (name, description, method, state reached) tuples for all steps."""
        return [
            (VALIDATE_STEP, "validating input", self.validate_step, ARGS_PARSED),
            (CHECK_DEPS_STEP, "checking dependencies", self.check_deps_step, DEPS_CHECKED),
            (RESOLVE_STEP, "resolving version", self.resolve_step, VERSION_RESOLVED),
            (SOURCE_STEP, "preparing sources", self.source_step, SOURCE_READY),
            (CONFIGURE_STEP, "configuring", self.configure_step, CONFIGURED),
            (BUILD_STEP, "building", self.build_step, BUILT),
            (INSTALL_STEP, "installing", self.install_step, INSTALLED),
            (ARCHIVE_STEP, "archiving sources", self.archive_step, ARCHIVED),
            (SYMLINK_STEP, "updating %s symlink" % self.symlink_name, self.symlink_step, SYMLINKED),
            (VERIFY_STEP, "verifying installation", self.sanity_check_step, VERIFIED),
        ]

    def run(self):
        """Install the package, going through all steps; returns path to installation directory."""
        self.log.info("Installing %s %s", self.name, self.version_token)

        with ExitStack() as exit_stack:
            self._exit_stack = exit_stack
            for step_name, descr, method, state in self.get_steps():
                self.run_step(step_name, descr, method)
                self.state = state
                self.log.info("Step '%s' completed, state is now %s", step_name, state)

        self._exit_stack = None

        if self.dependencies_notes:
            self.write_dependencies_notes()

        print_msg("Installed to: %s", self.installdir, log=self.log, prefix=False, silent=self.silent)
        hints = [hint % self.template_values() for hint in self.env_hints]
        for hint in hints:
            print_msg(hint, log=self.log, prefix=False, silent=self.silent)

        return self.installdir

    def run_step(self, step_name, descr, method):
        """Run a single step, marking the run as failed if it does not complete."""
        print_msg("%s...", descr, log=self.log, silent=self.silent)
        try:
            method()
        except TAXONOMY_ERRORS:
            self.mark_failed(step_name)
            raise
        except EasyBuildError as err:
            self.mark_failed(step_name)
            error_class = STEP_ERRORS.get(step_name)
            if error_class is None:
                raise BuildError("%s step failed: %s", step_name, err.msg, step=step_name)
            raise error_class("%s step failed: %s", step_name, err.msg)
        except RunShellCmdError as err:
            self.mark_failed(step_name)
            raise BuildError("%s step failed: %s", step_name, err, step=step_name)

    def write_dependencies_notes(self):
        """Write notes on runtime dependencies to DEPENDENCIES.txt in the installation directory (best effort)."""
        path = os.path.join(self.installdir, DEPENDENCIES_NOTES_FILE)
        try:
            write_file(path, self.dependencies_notes % self.template_values())
        except EasyBuildError as err:
            warn_best_effort("Failed to write %s: %s", path, err.msg, log=self.log)
        else:
            print_msg("Dependencies file created: %s", path, log=self.log, prefix=False, silent=self.silent)

    def mark_failed(self, step_name):
        """Transition to the FAILED state."""
        self.state = FAILED
        self.failed_step = step_name
        self.log.info("Step '%s' failed", step_name)

    def run_cmd(self, name, cmd, work_dir=None, env=None):
        """
        Run a single build command, named after what it does (e.g. 'configure', 'make install').

        :param work_dir: directory to run in (defaults to the build directory)
        :param env: additional environment variables to set (on top of those from build_env)
        """
        step_env = self.build_env()
        step_env.update(env or {})
        step = BuildStep(name=name, cmd=cmd, work_dir=work_dir or self.builddir, env=step_env)
        return run_build_step(step, log=self.log)

    def build_env(self):
        """Environment variables to set for all build commands."""
        return {}

    #
    # STEPS
    #

    def validate_step(self):
        """Check version token, variant, symlink name and package-specific options."""
        self.version_spec = parse_version_token(self.version_token)

        if self.variant is not None or self.variants is not None:
            check_variant(self.variant, self.variants)

        # a release version is used on disk as is, so it must be usable as directory name
        if not is_development(self.version_spec):
            det_version_dirname(self.version_spec.version, variant=self.variant)

        check_path_component(self.symlink_name, "Symlink name")
        if self.symlink_name == config.LOCK_FILE_NAME:
            raise ValidationError("Symlink name '%s' is reserved", self.symlink_name)

        if is_development(self.version_spec) and not (self.git_url or self.dev_url):
            raise ValidationError("Development version '%s' of %s can not be installed, sources must be obtained "
                                  "manually", self.version_spec.ref, self.name)

        known_options = self.extra_options()
        unknown = sorted(set(self.options) - set(known_options))
        if unknown:
            raise ValidationError("Unknown option(s) for %s: %s", self.name, ', '.join(unknown))

        self.cfg = dict((key, value[0]) for (key, value) in known_options.items())
        self.cfg.update(self.options)
        self.log.info("Options for %s: %s", self.name, self.cfg)

    def det_required_tools(self):
        """Commands that must be available in $PATH."""
        return list(self.required_tools)

    def det_dependencies(self):
        """Previously installed packages that are required (those disabled via an option are filtered out)."""
        return [dep for dep in self.dependencies if not (dep.optional_option and self.cfg.get(dep.optional_option))]

    def dependency_variant(self, dep):
        """Variant of dependency to use when an explicit version is specified for it."""
        return dep.variant

    def check_deps_step(self):
        """Check for required tools, and locate installations of required packages."""
        for tool in self.det_required_tools():
            if which(tool, on_error=IGNORE) is None:
                raise DependencyMissingError("Required command '%s' not found in $PATH", tool)

        for dep in self.det_dependencies():
            if dep.version_option:
                version = self.cfg.get(dep.version_option) or config.DEFAULT_DEP_VERSION
            else:
                version = config.DEFAULT_DEP_VERSION
            self.deps[dep.name] = locate_dependency(self.buildpath, dep.name, version=version,
                                                    variant=self.dependency_variant(dep), symlink_name=dep.symlink_name)
            self.log.info("Using %s installation at %s", dep.name, self.deps[dep.name])

    def resolve_step(self):
        """
        Determine version to use on disk, and assemble the install context.

        For development versions, the sources are cloned first (to a staging directory),
        since the version is determined from the source tree.
        """
        self._exit_stack.enter_context(package_lock(self.package_root, enabled=self.use_lock))

        srcdir = None
        if is_development(self.version_spec):
            ref = self.version_spec.ref
            staging_name = '%s-%s' % (self.name, ref.replace('/', '_'))
            self.staging_dir = os.path.join(self.sourcepath, staging_name)
            if self.git_url:
                fetch_or_use(self.sourcepath, None, self.staging_dir, git_url=self.git_url, git_ref=ref,
                             git_recursive=self.git_recursive, git_shallow=self.git_shallow, use_cache=False,
                             log=self.log)
            else:
                if os.path.exists(self.staging_dir):
                    remove_dir(self.staging_dir)
                staging_archive = staging_name + self.source_ext
                fetch_or_use(self.sourcepath, staging_archive, self.staging_dir,
                             url=self.dev_url % det_template_values(self.name, ref), use_cache=False, log=self.log)
                remove_file(os.path.join(self.sourcepath, staging_archive))
            srcdir = self.staging_dir

        try:
            version = resolve_version(self.version_spec, srcdir=srcdir, probes=self.version_probes)
            layout = det_install_layout(self.name, version, self.buildpath, self.sourcepath, variant=self.variant,
                                        build_subdir=self.build_in_subdir)
        except EasyBuildError:
            if self.staging_dir and os.path.exists(self.staging_dir):
                self.log.info("Removing staging directory %s", self.staging_dir)
                remove_dir(self.staging_dir)
            raise
        self.ctx = InstallContext(
            name=self.name,
            version_spec=self.version_spec,
            version=version,
            variant=self.variant,
            symlink_name=self.symlink_name,
            layout=layout,
            archive_name=det_archive_name(self.name, version, self.source_ext),
        )
        self.log.info("Install context: %s", self.ctx)

    def source_step(self):
        """Make the sources available in the source directory."""
        if self.staging_dir:
            if os.path.exists(self.srcdir):
                remove_dir(self.srcdir)
            move_file(self.staging_dir, self.srcdir)
            # a new build of the same development version replaces the previous one,
            # which is only discarded once the new one is installed
            if os.path.exists(self.installdir):
                self.set_aside_previous_install()
        else:
            tmpl_values = self.template_values()
            if self.source_url:
                kwargs = {'url': self.source_url % tmpl_values}
            elif self.git_url:
                kwargs = {'git_url': self.git_url, 'git_ref': self.git_ref % tmpl_values}
            else:
                kwargs = {}
            fetch_or_use(self.sourcepath, self.ctx.archive_name, self.srcdir, git_recursive=self.git_recursive,
                         git_shallow=self.git_shallow, manual_download_url=self.manual_download_url, log=self.log,
                         **kwargs)

        mkdir(self.installdir, parents=True)

    def set_aside_previous_install(self):
        """
        Move existing installation out of the way, to be restored if the new one does not get installed.
        """
        previous = self.installdir + PREVIOUS_SUFFIX
        if os.path.exists(previous):
            remove_dir(previous)
        self.log.info("Moving existing installation %s to %s", self.installdir, previous)
        move_file(self.installdir, previous)
        if self._exit_stack is not None:
            self._exit_stack.callback(self.finish_previous_install, previous)

    def finish_previous_install(self, previous):
        """Discard previous installation if the new one was installed, restore it otherwise."""
        if self.state in INSTALLED_STATES or (self.state == FAILED and self.failed_step in POST_INSTALL_STEPS):
            self.log.info("Removing previous installation %s", previous)
            try:
                remove_dir(previous)
            except EasyBuildError as err:
                warn_best_effort("Failed to remove previous installation %s: %s", previous, err.msg, log=self.log)
        else:
            self.log.info("Restoring previous installation %s", previous)
            try:
                if os.path.exists(self.installdir):
                    remove_dir(self.installdir)
                move_file(previous, self.installdir)
            except EasyBuildError as err:
                warn_best_effort("Failed to restore previous installation %s: %s", previous, err.msg, log=self.log)

    def configure_step(self):
        """Configure the build."""
        raise NotImplementedError

    def build_step(self):
        """Build the software."""
        raise NotImplementedError

    def install_step(self):
        """Install the software into the installation directory."""
        raise NotImplementedError

    def archive_step(self):
        """Archive source tree to the source cache (replacing the archive of a development version), and remove it."""
        replace = is_development(self.version_spec)
        archive_and_clean(self.srcdir, self.sourcepath, self.ctx.archive_name, replace=replace, log=self.log)

    def symlink_step(self):
        """Point the symlink to the new installation."""
        point_symlink(os.path.join(self.package_root, self.symlink_name), os.path.basename(self.installdir),
                      log=self.log)

    def sanity_check_step(self):
        """Check whether expected files, directories and executables are present in the installation directory."""
        checks = [
            ('files', os.path.isfile, "file"),
            ('dirs', os.path.isdir, "directory"),
            ('executables', lambda p: os.path.isfile(p) and os.access(p, os.X_OK), "executable"),
        ]
        missing = []
        for key, check, descr in checks:
            for entry in self.sanity_check_paths.get(key, []):
                paths = entry if isinstance(entry, tuple) else (entry,)
                if any(check(os.path.join(self.installdir, p)) for p in paths):
                    self.log.info("Found %s %s in %s", descr, ' or '.join(paths), self.installdir)
                else:
                    missing.append("%s %s" % (descr, ' or '.join(paths)))

        if missing:
            raise BuildError("Installation in %s is incomplete, missing: %s", self.installdir, ', '.join(missing),
                             step=VERIFY_STEP)
