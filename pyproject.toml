[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sasakit"
version = "2.1.2"
description = "Solvent accessible surface area calculations with the Lee & Richards and Shrake & Rupley algorithms"
requires-python = ">=3.10"
dependencies = []
keywords = ["sasa", "solvent accessible surface area", "protein", "pdb", "structural biology"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
    "Topic :: Scientific/Engineering :: Chemistry",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sasakit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
