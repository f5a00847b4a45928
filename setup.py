#!/usr/bin/env python3
"""
Setup script for Resourcery.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="resourcery",
    version="0.1.0",
    description="Declarative JSON:API-style resources over backing records",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Resourcery Contributors",
    packages=find_packages(include=["resourcery", "resourcery.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "inflection>=0.5.1",
        "PyYAML>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
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
        "Topic :: Software Development :: Libraries :: Application Frameworks",
    ],
    keywords="api resources json-api records declarative",
)
