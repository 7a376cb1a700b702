[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "saturnus"
version = "0.1.0"
description = "Lua 5.3 code generator for Saturnus syntax trees, with the titan project build tool"
requires-python = ">=3.11"
dependencies = []
keywords = ["saturnus", "lua", "compiler", "code-generation", "build-tool"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
titan = "saturnus.titan.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["saturnus"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
