# setup.py

from setuptools import setup, find_packages

setup(
    name="NonbondedMC",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "numba",
        "scipy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
