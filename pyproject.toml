[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "datamap"
version = "0.1.0"
description = "Reshard directories of JSON Lines files into zstd-compressed shards"
requires-python = ">=3.10"
keywords = ["jsonl", "reshard", "zstd", "sharding", "data pipeline"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Filters",
    "Topic :: Utilities",
]
dependencies = [
    "pyyaml",
    "zstandard",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
datamap = "datamap.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["datamap"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
