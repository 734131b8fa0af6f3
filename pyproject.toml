[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "makedot"
version = "0.1.0"
description = "Generate Graphviz dependency graphs from a GNU make database"
requires-python = ">=3.10"
dependencies = []
keywords = ["make", "gnumake", "graphviz", "dot", "dependencies", "build"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
makedot = "makedot.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["makedot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
