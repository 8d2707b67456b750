[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "huadb"
version = "0.1.0"
description = "Pages, buffer pool, write-ahead log and transaction bookkeeping for a small teaching database"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "storage", "buffer-pool", "write-ahead-log", "transactions", "locking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["huadb"]

[tool.pytest.ini_options]
addopts = "-ra"
