# setup.py
from setuptools import setup, find_packages

setup(
    name="schema-tree",                         # the *distribution* name on PyPI
    version="1.0.0",
    packages=find_packages(exclude=("tests", "tests.*")),   # will find schema_tree/
    python_requires=">=3.10",
    install_requires=["pandas", "PyYAML"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["schema-tree=schema_tree.cli:main"],
    },
    description="JSON Schema parser producing immutable validator trees, with flag/basic/detailed output",
    author="Your Name",
    license="Creative Commons Attribution-NonCommercial-ShareAlike 4.0 International License",
)
