"""
Configuration module - Centralized settings management.

This module provides type-safe configuration management using Pydantic,
supporting environment variables, YAML files, and CLI arguments.

Usage:
    from web_commander.config import get_settings, load_config
    
    # Get global settings (loaded once)
    settings = get_settings()
    
    # Or load fresh settings with overrides
    settings = load_config(browser={"headless": True})

Environment Variables:
    WEB_COMMANDER__LLM__MODEL=gpt-4o-mini
    WEB_COMMANDER__LLM__BASE_URL=https://api.openai.com
    WEB_COMMANDER__BROWSER__HEADLESS=true
    WEB_COMMANDER__CHUNKING__TOKEN_LIMIT=2048
    OPENAI_API_KEY=sk-...
"""

from web_commander.config.settings import (
    Settings,
    BrowserSettings,
    LLMSettings,
    ChunkingSettings,
    TemplateSettings,
    LoggingSettings,
)
from web_commander.config.loader import ConfigLoader, load_config, require_api_key

# Global settings singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).
    
    Settings are loaded once from environment variables and config files.
    Call reset_settings() to reload.
    
    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (forces reload on next get_settings())."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "BrowserSettings",
    "LLMSettings",
    "ChunkingSettings",
    "TemplateSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_config",
    "require_api_key",
    "get_settings",
    "reset_settings",
]
