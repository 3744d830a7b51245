[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linkshort"
version = "0.1.0"
description = "A small URL shortener WSGI service with base62 keys, pluggable storage, a Redis cache and rate limiting"
requires-python = ">=3.10"
keywords = [
    "url-shortener",
    "wsgi",
    "base62",
    "redis",
    "mongodb",
    "rate-limiting",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]
dependencies = [
    "werkzeug>=3.0",
    "redis>=5.0",
    "pymongo>=4.6",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
linkshort = "linkshort.app:main"

[tool.hatch.build.targets.wheel]
packages = ["linkshort"]

[tool.hatch.build.targets.sdist]
include = ["linkshort", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
