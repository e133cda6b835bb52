"""
Runtime Configuration Module

Provides configuration loading and management for the distribution engine.
"""

from .runtime import (
    DEFAULT_SCALE,
    LedgerConfig,
    LoggingConfig,
    OutputConfig,
    RuntimeConfig,
    get_default_config,
)

__all__ = [
    "DEFAULT_SCALE",
    "LedgerConfig",
    "LoggingConfig",
    "OutputConfig",
    "RuntimeConfig",
    "get_default_config",
]
