#!/usr/bin/env python3

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="serialdl",
    version="0.1.0",
    author="Easyoakland",
    author_email="",
    description="Incremental downloader for online serials",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Easyoakland/royalroad-dl",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Internet :: WWW/HTTP",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
    install_requires=[
        "beautifulsoup4>=4.11.0",
        "lxml>=4.9.0",
        "requests>=2.28.0",
        "rich>=13.0.0",
        "typer>=0.9.0",
        "pydantic>=2.5.0",
        "pyrate-limiter>=3.7,<4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "serialdl=serialdl.__main__:main",
        ],
    },
)
