# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Setup configuration for the vault-sync package."""

from pathlib import Path

from setuptools import find_packages, setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="vault-sync",
    version="0.1.0",
    description="Keeps in-process consumers supplied with secrets from HashiCorp Vault",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="vault-sync contributors",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "hvac>=2.0.0",
        "requests>=2.28.0",
        "python-hcl2>=4.3.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.12",
    ],
)
