[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "brokenithm"
version = "0.1.2"
description = "Four-button rhythm game controller served to a browser, with button state tracking and key event generation."
requires-python = ">=3.10"
keywords = ["controller", "rhythm game", "websocket", "keyboard", "mania"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "aiohttp",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["brokenithm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
