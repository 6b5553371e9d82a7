[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "userapi"
version = "0.1.0"
description = "A small JSON HTTP service for authenticating and managing users stored in MongoDB"
requires-python = ">=3.10"
keywords = ["users", "rest", "mongodb", "jwt", "flask", "authentication"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "pymongo",
    "pyjwt",
    "bcrypt",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
userapi = "userapi.app:main"

[tool.hatch.build.targets.wheel]
packages = ["userapi"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
