"""Colorize keywords in a text stream and page it with less."""

__version__ = "0.1.0"
