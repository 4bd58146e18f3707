"""
Runtime Configuration Module

Provides configuration loading and logging setup.
"""

from .runtime import HashConfig, LoggingConfig, RuntimeConfig, setup_logging

__all__ = [
    "RuntimeConfig",
    "HashConfig",
    "LoggingConfig",
    "setup_logging",
]
