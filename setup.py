"""
Setup script for the team-challenge package.

Installs the ``team_challenge`` package from ``src/`` together with the
SQLite schema it creates on first use, and a ``team-challenge`` command.
"""

from setuptools import setup, find_packages

setup(
    name="team-challenge",
    version="1.0.0",
    description="Team Challenge - turn-based team quiz matches with steals and consensus",
    author="Course Staff",
    license="Proprietary",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "anthropic>=0.18.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "team_challenge._store": ["schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "team-challenge=team_challenge.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
