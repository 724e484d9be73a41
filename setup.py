from setuptools import setup, find_packages

setup(
    name="radiant-meteor-log",
    version="0.1.0",
    description="Meteor shower forecasts, reminders, and observation log statistics",
    author="Radiant",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "radiant": ["data/*.json"],
        "radiant.database": ["schema.sql"],
    },
    python_requires=">=3.11",
    install_requires=[
        "PyQt6>=6.6.0",
    ],
    extras_require={
        "test": ["pytest>=8.0", "pytest-qt>=4.4.0"],
    },
    entry_points={
        "console_scripts": [
            "radiant=radiant.main:main",
        ],
    },
)
