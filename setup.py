"""setuptools setup for PomoKeeper.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="PomoKeeper",
    version="0.1.0",
    description="Drift-corrected, restart-safe Pomodoro timer engine",
    packages=find_packages(include=["pomokeeper", "pomokeeper.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "pomokeeper = pomokeeper.__main__:main",
        ],
    },
)
