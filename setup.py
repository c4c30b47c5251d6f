"""
Setup script for notebook_flowgraph package.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

version = "0.1.0"

setup(
    name="notebook-flowgraph",
    version=version,
    description="Cell dependency graphs with deterministic layout for computational notebooks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Visualization",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
    install_requires=[
        "networkx>=2.6",
        "matplotlib>=3.4",
        "numpy>=1.20",
        "nbformat>=5.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "black>=23.0",
            "isort>=5.10",
            "mypy>=1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "notebook-flowgraph=notebook_flowgraph.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
