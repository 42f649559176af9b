[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pihob"
version = "0.1.0"
description = "Platform Initialization Hand Off Block (HOB) lists: parsing, building and serialising, plus PI protocol GUIDs"
requires-python = ">=3.10"
dependencies = []
keywords = ["uefi", "pi", "hob", "firmware", "hand-off-block", "dxe"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Boot",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pihob"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
