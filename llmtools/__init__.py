"""Helpers for LLM command-line tools: prompt templates, paths, commands, loaders and terminal output."""

__version__ = "0.1.0"