"""
Genalgo - Source Package

This package contains the genetic algorithm engine and the process-wide
configuration and observability helpers it runs with.
"""

__version__ = "1.0.0"

# Package-level imports for convenience
from src.core.config import settings

__all__ = [
    "settings",
    "__version__",
]
