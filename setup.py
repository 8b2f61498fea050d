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
This script can be used to install hpcinstall, e.g. using:
  pip install --user .
"""

import os
import re

from setuptools import setup


# Utility function to read README file
def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


# determine version without importing hpcinstall, since that requires easybuild-framework to be installed
VERSION = re.search(r"^VERSION = LooseVersion\('([^']+)'\)", read(os.path.join('hpcinstall', '__init__.py')),
                    re.M).group(1)

FRAMEWORK_MAJVER = '5'

setup(
    name="hpcinstall",
    version=VERSION,
    author="hpcinstall contributors",
    description="""Build and install scientific software from source into versioned directories, \
 with a symlink selecting the default version of each package.""",
    license="GPLv2",
    keywords="software build building installation installing compilation HPC scientific",
    packages=["hpcinstall", "hpcinstall.framework", "hpcinstall.installers", "hpcinstall.installers.generic"],
    package_data={'hpcinstall.installers': ["[a-z0-9]/*.py"]},
    long_description=read("README.rst"),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Build Tools",
    ],
    platforms="Linux",
    python_requires=">=3.6",
    install_requires=["easybuild-framework>=%s.0" % FRAMEWORK_MAJVER],
    entry_points={
        'console_scripts': ['hpc-install=hpcinstall.main:main'],
    },
)
