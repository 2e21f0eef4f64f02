[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "avrobin"
version = "0.1.0"
description = "A buffered writer for the Avro binary encoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["avro", "binary", "encoding", "serialization", "zigzag", "varint"]
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
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["avrobin"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
