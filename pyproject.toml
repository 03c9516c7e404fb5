[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stufflib"
version = "0.1.0"
description = "Small, dependable building blocks: hashing, sorting, union-find, UTF-8 strings, DEFLATE, PNG images and binary record files."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "crc32",
    "adler32",
    "deflate",
    "png",
    "huffman",
    "union-find",
    "sorting",
    "utf-8",
    "hashmap",
]
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
    "Topic :: Software Development :: Libraries",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["stufflib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
