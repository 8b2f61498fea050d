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
hpcinstall: build and install scientific software into a versioned directory layout,
with a symlink selecting the default version of each package.
"""
from easybuild.tools import LooseVersion

# note: setup.py picks up the version from this line, keep it a plain string literal
VERSION = LooseVersion('1.0.0')
