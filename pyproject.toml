[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jetba"
version = "0.1.0"
description = "Vectorised forward-mode automatic differentiation and graph building blocks for bundle adjustment"
requires-python = ">=3.10"
keywords = ["bundle adjustment", "automatic differentiation", "jet", "optimization", "schur complement"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["jetba"]

[tool.pytest.ini_options]
addopts = "-ra"
