[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "concurrentcounter"
version = "0.1.0"
description = "Thread-safe integer counters that run trigger functions when they reach given values"
requires-python = ">=3.10"
dependencies = []
keywords = ["counter", "concurrency", "thread-safe", "trigger", "callback"]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["concurrentcounter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
