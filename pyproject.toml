[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "baton-onelogin"
version = "0.1.0"
description = "Connector that syncs OneLogin users, roles, groups and applications and manages role grants."
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["onelogin", "identity", "access-review", "connector", "iam", "sync"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration :: Authentication/Directory",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
baton-onelogin = "baton_onelogin.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["baton_onelogin"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
