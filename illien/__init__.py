"""Illien: a minimal Markdown journal."""

__version__ = "0.1.0"
