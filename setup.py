#!/usr/bin/env python
"""Setup script to make regen-atlas directly installable with pip."""

from pathlib import Path

from setuptools import find_packages, setup

readme_path = Path(__file__).parent / "README.rst"
long_description = readme_path.read_text()

setup(
    name="regen-atlas",
    version="0.1.0",
    description=(
        "A descriptive report on renewable power plants, capacity density by region "
        "and electricity production."
    ),
    long_description=long_description,
    long_description_content_type="text/x-rst",
    license="MIT",
    keywords=[
        "electricity",
        "energy",
        "renewables",
        "power plants",
        "nuts regions",
        "choropleth",
        "smard",
        "opsd",
        "germany",
    ],
    python_requires=">=3.11",
    install_requires=[
        "click>=8.1",
        "coloredlogs>=14.0",
        "dagster>=1.7",
        "fsspec>=2023.6",
        "geopandas>=0.14",
        "jinja2>=3.1",
        "matplotlib>=3.7",
        "numpy>=1.26",
        "pandas>=2.2,<3",
        "pandera>=0.18",
        "pydantic>=2.6,<3",
        "pydantic-settings>=2.2",
        "pyogrio>=0.7",
        "pyyaml>=6",
        "shapely>=2.0",
    ],
    extras_require={
        "test": [
            "coverage>=7",
            "pytest>=8",
            "pytest-console-scripts>=1.4",
            "pytest-cov>=4.1",
            "pytest-mock>=3.12",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering",
    ],
    packages=find_packages("src"),
    package_dir={"": "src"},
    # package_data is data that is deployed within the python package on the
    # user's system.
    include_package_data=True,
    package_data={"regen_atlas.package_data.settings": ["*.yml"]},
    # This defines the interfaces to the command line scripts we're including:
    entry_points={
        "console_scripts": [
            "regen_report = regen_atlas.etl.cli:regen_report",
        ]
    },
)
