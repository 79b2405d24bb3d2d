[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "pipeshell"
version = "0.1.0"
description = "Execution core of a small POSIX-style shell: builtins, redirections, environment handling and pipelines"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "pipeline", "builtins", "redirection", "environment"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["pipeshell*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
