#!/usr/bin/env python
# -*- coding: utf-8 -*-

import os
import os.path

from codecs import open
from datetime import datetime
from setuptools import setup, find_packages

minor_version = "0.1.0"


VERSIONFILE = os.path.join(os.path.dirname(__file__), 'bytetubes/VERSION')
if os.path.exists(VERSIONFILE):
    with open(VERSIONFILE, "r", "utf-8") as f:
        version = f.read().strip()
else:
    if os.environ.get("TRAVIS_BRANCH") == "release":
        revision = "r" + os.environ.get("TRAVIS_BUILD_NUMBER")
        version = minor_version + revision
    else:
        date = datetime.now().strftime(".dev%Y%m%d%H%M%S")
        revision = os.environ.get("REVISION", date)
        version = minor_version + revision

with open(VERSIONFILE, "w", "utf-8") as f:
    f.write(version)

with open(os.path.join(os.path.dirname(__file__), "README.rst"), "r",
          "utf-8") as f:
    readme = f.read()


setup(
    name="bytetubes",
    version=version,
    description="Delimiter aware byte streams over processes and sockets",
    long_description=readme,
    author="Bob Corsaro",
    author_email="rcorsaro@gmail.com",
    package_data={"": ["LICENSE"], "bytetubes": ["VERSION"]},
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    python_requires=">=3.6",
    install_requires=[
        "requests",
        "urllib3",
    ],
    license="MIT",
    zip_safe=False,
    classifiers=[
        'Development Status :: 3 - Alpha',

        'Intended Audience :: Developers',

        'License :: OSI Approved :: MIT License',

        'Operating System :: POSIX',

        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Programming Language :: Python :: Implementation :: PyPy',
    ],
    extras_require={
        "build": [
            "yapf",
            "pyflakes",
            "pytest",
            "coveralls",
        ],
        "test": [
            "pytest",
        ],
    },
)
