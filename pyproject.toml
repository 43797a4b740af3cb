[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "edwood"
version = "0.1.0"
description = "Building blocks of an Acme-style text editor: Edit command parsing, dump files, file name completion, a rune block store and command bookkeeping"
requires-python = ">=3.10"
dependencies = []
keywords = ["editor", "sam", "edit commands", "dump file", "completion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["edwood"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
