[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trainsearch"
version = "0.1.0"
description = "LCC/OpenLCB train search protocol, train database model, FDI XML generation and DCC packet helpers for a command station."
requires-python = ">=3.11"
dependencies = []
keywords = [
    "openlcb",
    "lcc",
    "dcc",
    "model railroad",
    "command station",
    "train search",
    "fdi",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
trainsearch-cs = "trainsearch.options:main"

[tool.hatch.build.targets.wheel]
packages = ["trainsearch"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
