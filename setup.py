from setuptools import find_packages, setup

setup(
    name="torusgrid",
    packages=find_packages(include=["torusgrid", "torusgrid.*"]),
    version="0.1.0.dev0",
    description="Fixed-capacity spatial grid engine for neighbor interactions of agents on a torus",
    license="MIT License",
    python_requires=">=3.11",
    install_requires=[
        "numpy>=1.26",
        "polars>=1.0",
        "numba>=0.59",
        "beartype>=0.18",
    ],
    extras_require={
        "test": [
            "pytest",
            "typer>=0.9",
        ],
        "benchmarks": [
            "typer>=0.9",
        ],
    },
)
