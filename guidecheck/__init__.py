"""Structural auditor for Markdown interview guides and career roadmaps."""

__version__ = "0.1.0"
