#!/usr/bin/env python3
"""
Setup script for modalis.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="modalis",
    version="0.1.0",
    description="On-demand fragment rendering with asset discovery and a two-tier render cache",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Modalis Contributors",
    packages=find_packages(include=["modalis", "modalis.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "python-dotenv>=1.0.0",
        "PyYAML>=6.0",
        "redis>=5.0.0",
        "beautifulsoup4>=4.12.0",
    ],
    extras_require={
        "msgpack": [
            "msgpack>=1.0.0",
        ],
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "msgpack>=1.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "Topic :: Software Development :: Libraries",
    ],
    keywords="render cache assets fragments popup gallery",
)
