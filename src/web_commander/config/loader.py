"""
Config Loader - Build Settings from a YAML file, the environment and CLI flags.

Sources, highest priority first:

1. Overrides passed to ``load()`` (CLI flags such as ``--model``)
2. ``WEB_COMMANDER__*`` variables (a ``.env`` in the working directory is read first)
3. The config file (``--config`` or the first of ``DEFAULT_CONFIG_PATHS`` found)
4. Defaults

``OPENAI_API_KEY`` fills ``llm.api_key`` when none of the above set it.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic_settings import EnvSettingsSource

from web_commander.config.settings import Settings, deep_merge
from web_commander.exceptions import ConfigurationError


class ConfigLoader:
    """
    Loads Web Commander settings.

    Example:
        >>> settings = ConfigLoader("web-commander.yaml").load(overrides={"browser": {"headless": True}})
    """

    DEFAULT_CONFIG_PATHS = [
        Path("web-commander.yaml"),
        Path("config.yaml"),
        Path.home() / ".config" / "web-commander" / "config.yaml",
    ]

    # Conventional variable read when llm.api_key is not configured
    API_KEY_ENV = "OPENAI_API_KEY"

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Args:
            config_path: Explicit config file; must exist when given
        """
        self.config_path = Path(config_path) if config_path else None

    def find_config_file(self) -> Optional[Path]:
        """
        The config file to read, if any.

        Raises:
            ConfigurationError: If an explicit config path does not exist
        """
        if self.config_path:
            if not self.config_path.exists():
                raise ConfigurationError(f"Config file not found: {self.config_path}")
            return self.config_path

        for path in self.DEFAULT_CONFIG_PATHS:
            if path.exists():
                return path
        return None

    def load_yaml_config(self, path: Path) -> Dict[str, Any]:
        """
        Read a config file into nested section dicts.

        Raises:
            ConfigurationError: If the file is not YAML or not a mapping
        """
        with open(path, "r") as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}")
        if config is not None and not isinstance(config, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return config or {}

    def load(
        self,
        env_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        """
        Load settings from all sources.

        Args:
            env_file: ``.env`` file to read (default: ``./.env`` when present)
            overrides: Values that beat every other source

        Returns:
            Complete Settings instance
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv(Path(".env"))

        config: Dict[str, Any] = {}
        config_file = self.find_config_file()
        if config_file:
            config = self.load_yaml_config(config_file)

        # Constructor values outrank the environment in pydantic-settings,
        # so environment values are laid over the file before constructing
        deep_merge(config, EnvSettingsSource(Settings)())
        settings = Settings(**config)

        if settings.llm.api_key is None and os.environ.get(self.API_KEY_ENV):
            settings = settings.merge_with({"llm": {"api_key": os.environ[self.API_KEY_ENV]}})

        if overrides:
            settings = settings.merge_with(overrides)

        return settings


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> Settings:
    """
    Load settings in one call.

    Example:
        >>> settings = load_config(config_path="web-commander.yaml", llm={"model": "gpt-4o"})
    """
    loader = ConfigLoader(config_path)
    return loader.load(env_file=env_file, overrides=overrides or None)


def require_api_key(settings: Settings) -> str:
    """
    Return the configured API key or fail loudly.

    Raises:
        ConfigurationError: If no API key is configured
    """
    if settings.llm.api_key is None or not settings.llm.api_key.get_secret_value():
        raise ConfigurationError(
            "Missing API key. Set OPENAI_API_KEY or WEB_COMMANDER__LLM__API_KEY "
            "(a .env file in the working directory is read automatically)."
        )
    return settings.llm.api_key.get_secret_value()
