"""
Utilities module - Common utility functions.
"""

from web_commander.utils.logging import setup_logging, setup_logging_from_settings, JsonFormatter

__all__ = [
    "setup_logging",
    "setup_logging_from_settings",
    "JsonFormatter",
]
