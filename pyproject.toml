[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "avrograph"
version = "0.1.0"
description = "Parse, edit, canonicalise and fingerprint Avro schemas as a graph of nodes"
requires-python = ">=3.10"
dependencies = []
keywords = ["avro", "schema", "fingerprint", "rabin", "canonical-form"]
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
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["avrograph"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
