[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "molpack"
version = "0.1.0"
description = "Package a Modelica library directory into a .mol container with a generated manifest"
requires-python = ">=3.10"
dependencies = []
keywords = ["modelica", "library", "packaging", "manifest", "archive", "mol"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Packaging",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
molpack = "molpack.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["molpack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
