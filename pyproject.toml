[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mpctss"
version = "0.1.0"
description = "Building blocks for threshold signatures: elliptic curves, hashing, commitments and Shamir secret sharing"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "cryptography",
    "threshold-signatures",
    "mpc",
    "shamir",
    "secret-sharing",
    "pedersen",
    "commitment",
    "elliptic-curve",
    "secp256k1",
    "ed25519",
    "hash-to-curve",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mpctss"]

[tool.hatch.build.targets.sdist]
include = [
    "mpctss",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
