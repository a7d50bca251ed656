[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wandelt"
version = "0.1.0"
description = "Front end for the Wandelt language: tokens, builtin types, syntax tree, diagnostics and a Pratt parser"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "parser", "diagnostics", "programming-language", "ast"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wandelt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
