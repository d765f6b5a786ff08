"""Exceptions raised by the force conversion engine."""

from typing import Any, Dict, Optional


class ForceConversionError(Exception):
    """Base exception for all force conversion errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self):
        if not self.context:
            return self.message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({context_str})"


class ConfigurationError(ForceConversionError):
    """Required configuration could not be loaded. Aborts the run."""
