[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tixml"
version = "1.0.0"
description = "A small, forgiving XML document object model with its own parser and pretty printer"
requires-python = ">=3.10"
dependencies = []
keywords = ["xml", "dom", "parser", "pretty-print", "visitor"]
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
    "Topic :: Text Processing :: Markup :: XML",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tixml"]

[tool.pytest.ini_options]
addopts = "-ra"
