#!/usr/bin/env python
"""
BPM - Blur Package Manager: a local, manifest-driven package manager
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Define required packages
required_packages = [
    "pydantic>=2.0.0",  # For manifest, state and config validation
    "pyyaml>=6.0",      # For configuration file support
    "rich>=13.5.0",     # For rich terminal output
    "tqdm>=4.64.0",     # For progress bars
]

setup(
    name="bpm",
    version="0.1.2",
    description="A local package manager with recursive dependency resolution",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=required_packages,
    entry_points={
        'console_scripts': [
            'bpm=bpm.cli:main',
        ],
    },
    include_package_data=True,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
