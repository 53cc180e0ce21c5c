[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coremark"
version = "1.0.0"
description = "The CoreMark processor benchmark: list processing, matrix manipulation, a state machine and CRC validation"
requires-python = ">=3.10"
dependencies = []
keywords = ["benchmark", "coremark", "crc", "performance", "cpu"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
coremark = "coremark.runner:main"

[tool.hatch.build.targets.wheel]
packages = ["coremark"]

[tool.pytest.ini_options]
addopts = "-ra"
