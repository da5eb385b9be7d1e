#!/usr/bin/env python
# -*- coding: utf-8 -*-

import os.path
import re
from pkgutil import walk_packages

from setuptools import setup


def find_packages(path=["."], prefix=""):
    yield prefix
    prefix = prefix + "."
    for _, name, ispkg in walk_packages(path, prefix):
        if ispkg:
            yield name


with open(os.path.join("sfpermset", "version.txt"), "r") as version_file:
    version = version_file.read().strip()

with open("README.rst", "rb") as readme_file:
    readme = readme_file.read().decode("utf-8")

with open("HISTORY.rst", "rb") as history_file:
    history = history_file.read().decode("utf-8")

with open("requirements/prod.txt") as requirements_file:
    requirements = []
    for req in requirements_file.read().splitlines():
        # skip comments and hash lines
        if re.match(r"\s*#", req) or re.match(r"\s*--hash", req) or not req.strip():
            continue
        else:
            requirements.append(req.split(" ")[0])

with open("requirements/dev.txt") as requirements_file:
    test_requirements = [
        req.split(" ")[0]
        for req in requirements_file.read().splitlines()
        if req.strip() and not re.match(r"\s*(#|-r)", req)
    ]

setup(
    name="sfpermset",
    version=version,
    description="Job action that adds a Salesforce user to a Permission Set",
    long_description=readme + "\n\n" + history,
    long_description_content_type="text/x-rst",
    packages=list(find_packages(["sfpermset"], "sfpermset")),
    package_dir={"sfpermset": "sfpermset"},
    package_data={"sfpermset": ["version.txt"]},
    entry_points={
        "console_scripts": [
            "sfpermset=sfpermset.cli.cli:main",
        ]
    },
    include_package_data=True,
    install_requires=requirements,
    extras_require={"test": test_requirements},
    license="BSD license",
    zip_safe=False,
    keywords="salesforce permission-set",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.8",
)
