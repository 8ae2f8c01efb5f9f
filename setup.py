# noqa
from setuptools import find_packages, setup

setup(
    name="cspom",
    version="0.1.0",
    description="Compile predicate expressions into constraint hypergraphs",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.12",
    install_requires=[
        "graphviz",
        "ipython",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
