[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tpcbench"
version = "0.1.0"
description = "Building blocks for TPC-C benchmarking of MySQL-compatible databases"
requires-python = ">=3.10"
dependencies = []
keywords = ["tpc-c", "benchmark", "mysql", "database", "latency", "histogram"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tpcbench"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
