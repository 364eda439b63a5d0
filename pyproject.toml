[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ompbot"
version = "0.1.0"
description = "A Telegram bot that routes /command__domain__subdomain messages to per-domain command handlers"
requires-python = ">=3.10"
keywords = ["telegram", "bot", "chat", "commands", "router"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "requests",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ompbot = "ompbot.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ompbot"]

[tool.pytest.ini_options]
addopts = "-ra"
