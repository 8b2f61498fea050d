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
hpcinstall installers: one module per supported package, in a subdirectory named after
the first letter of the package name, plus generic installers in the 'generic' subpackage.
"""
import glob
import importlib
import inspect
import os

from hpcinstall.framework.errors import ValidationError
from hpcinstall.framework.installer import Installer

# make python find the installers in the subdirectories where they are located
_installers_dir = os.path.dirname(os.path.abspath(__file__))
for subdir in [chr(char) for char in range(ord('a'), ord('z') + 1)] + ['0']:
    if os.path.isdir(os.path.join(_installers_dir, subdir)):
        __path__.append(os.path.join(_installers_dir, subdir))


def avail_installers():
    """Return sorted list of names of packages for which an installer is available."""
    names = set()
    for path in __path__:
        for mod_path in glob.glob(os.path.join(path, '*.py')):
            mod_name = os.path.splitext(os.path.basename(mod_path))[0]
            if not mod_name.startswith('_'):
                names.add(mod_name)
    return sorted(names)


def get_installer_class(name):
    """Return installer class for the package with the given name."""
    if name not in avail_installers():
        raise ValidationError("Unknown package '%s', available packages: %s", name, ', '.join(avail_installers()))

    mod = importlib.import_module('%s.%s' % (__name__, name))
    for _, cls in inspect.getmembers(mod, inspect.isclass):
        if issubclass(cls, Installer) and cls.name == name:
            return cls

    raise ValidationError("No installer class for package '%s' found in %s", name, mod.__file__)
