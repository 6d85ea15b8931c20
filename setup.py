#!/usr/bin/env python3
"""
Setup configuration for lastfm-archiver
Archive a Last.fm listening history into a local SQLite database
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "requests>=2.31.0",
    "click>=8.1.7",
    "rich-click>=1.7.0",
    "rich>=13.7.0",
    "tqdm>=4.66.1",
    "pyyaml>=6.0.1",
]

setup(
    name="lastfm-archiver",
    version="0.3.0",
    author="lastfm-archiver",
    description="Archive a Last.fm listening history into a local SQLite database",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Database",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "lastfm-archiver=lastfm_archiver.cli:main",
        ],
    },
    keywords="lastfm last.fm scrobbles archive sqlite cli",
)
