#!/usr/bin/env python3

from setuptools import find_packages, setup

version = {}
with open("./rust_releases/_version.py") as f:
    exec(f.read(), version)

with open("./README.md") as f:
    long_description = f.read()

setup(
    name="rust-releases",
    version=version["__version__"],
    license="Apache-2.0",
    description="Index the known releases of the Rust toolchain",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/foresterre/rust-releases",
    packages=find_packages(exclude=["test", "test.*"]),
    entry_points={
        "console_scripts": [
            "rust-releases = rust_releases._cli:main",
        ]
    },
    platforms="any",
    python_requires=">=3.9",
    install_requires=[
        "packaging>=21.0.0",
        "requests>=2.26.0",
        "CacheControl[filecache]>=0.12.10",
        "platformdirs>=2.4.0",
        "rich>=12.0.0",
        "toml>=0.10",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
            "pretend",
            "hypothesis",
            "coverage[toml]",
        ],
        "dev": [
            "flake8",
            "black",
            "isort",
            "pytest",
            "pytest-cov",
            "pretend",
            "hypothesis",
            "coverage[toml]",
            "mypy",
            "types-requests",
            "types-toml",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Build Tools",
    ],
)
