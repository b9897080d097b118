"""
Core functionality for the genalgo engine.

This package contains process-wide configuration and observability setup
shared by the algorithm modules.
"""

from src.core.config import settings, Settings
from src.core.observability import configure_observability

__all__ = [
    "settings",
    "Settings",
    "configure_observability",
]
