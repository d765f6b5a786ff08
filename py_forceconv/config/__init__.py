"""
Configuration for the force converter.
"""

from .settings import Settings

__all__ = ['Settings']
