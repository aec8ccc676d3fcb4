[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitkview"
version = "0.1.0"
description = "Git repository browsing toolkit: commit models, filtered commit views, tag management and persistent settings"
requires-python = ">=3.10"
keywords = ["git", "repository", "commits", "tags", "views"]
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
    "Topic :: Software Development :: Version Control :: Git",
]
dependencies = [
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gitkview"]

[tool.pytest.ini_options]
addopts = "-ra"
