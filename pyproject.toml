[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "llmtools"
version = "0.1.0"
description = "Helpers for LLM command-line tools: prompt templates, glob expansion, document loader commands, shell integration and terminal output."
requires-python = ">=3.10"
dependencies = []
keywords = ["llm", "cli", "prompt", "glob", "shell", "spinner"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["llmtools"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
