[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "peforge"
version = "0.1.0"
description = "Work with parts of Portable Executable images: section headers, rich data, base relocations, TLS directories and resource trees"
requires-python = ">=3.10"
dependencies = []
keywords = ["pe", "portable-executable", "resources", "relocations", "tls", "binary"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["peforge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
