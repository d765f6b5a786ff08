"""Converts source-game armies and navies into destination force hierarchies."""

__version__ = "0.1.0"
