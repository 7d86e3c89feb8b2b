[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mysqlop"
version = "0.1.0"
description = "Build Kubernetes volume, volume claim and container definitions for replicated MySQL clusters"
requires-python = ">=3.10"
dependencies = []
keywords = ["mysql", "kubernetes", "operator", "xenon", "statefulset"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mysqlop"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
