[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xfon"
version = "1.0.0"
description = "Display information about X.509 certificates: show their contents and print their issuance tree"
requires-python = ">=3.10"
keywords = ["x509", "certificate", "der", "pem", "pki", "tree"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Utilities",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "cryptography",
]

[project.scripts]
xfon = "xfon.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["xfon"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
