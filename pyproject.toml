[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nettools"
version = "0.1.0"
description = "Support library for Linux network tools: address families, hardware types, /proc parsers and route tables"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "networking",
    "linux",
    "routing",
    "procfs",
    "ipv6",
    "x25",
    "netrom",
    "rose",
    "ipx",
    "slip",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nettools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
