"""
Core infrastructure for the dispatch tracker.

This module provides:
- Config: Configuration management
- Logging: structlog setup
- Errors: Exception taxonomy shared by every layer
"""

from .config import ConfigManager, get_config
from .errors import HaulixError, LoadValidationError, RecordNotFoundError, TransportError

__all__ = [
    "ConfigManager",
    "get_config",
    "HaulixError",
    "LoadValidationError",
    "RecordNotFoundError",
    "TransportError",
]
