[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "blocstore"
version = "1.0.0"
description = "Hierarchical block/part/structure binary files, fixed-size record files and line-oriented text files"
requires-python = ">=3.10"
dependencies = []
keywords = ["binary", "file format", "records", "blocks", "text lines"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["blocstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
