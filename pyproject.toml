[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gmeasure"
version = "1.17.0"
description = "Record, summarise, rank and cache benchmark measurements of values and durations."
requires-python = ">=3.10"
dependencies = []
keywords = ["benchmark", "measurement", "statistics", "stopwatch", "testing"]
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
    "Topic :: Software Development :: Testing",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gmeasure"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
