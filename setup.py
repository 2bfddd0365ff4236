"""Setup configuration for testrail-runs tool."""

from setuptools import setup, find_packages

setup(
    name="testrail-runs",
    version="0.1.0",
    description="List TestRail runs filtered by configuration and result status",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "requests>=2.31.0",
        "pyyaml>=6.0",
        "click>=8.2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "testrail-runs=testrail_runs.cli:main",
        ],
    },
)
