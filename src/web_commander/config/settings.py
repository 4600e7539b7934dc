"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from web_commander.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.chunking.token_limit)
    2048
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_4 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.4 Mobile/15E148 Safari/604.1"
)


def deep_merge(base: dict, updates: dict) -> dict:
    """Recursively merge ``updates`` into ``base`` (in place) and return it."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


class BrowserSettings(BaseModel):
    """
    Browser automation settings.
    
    Timeouts of 0 mean "wait forever" (Playwright semantics).
    
    Attributes:
        headless: Run browser in headless mode
        browser_type: Playwright browser to launch
        viewport_width: Browser viewport width in pixels
        viewport_height: Browser viewport height in pixels
        user_agent: User agent string sent by every page
        navigation_timeout_ms: Timeout for ``go`` and fallback navigations
        settle_timeout_ms: Timeout for load/content waits after clicks and searches
        click_pause_ms: Pause after a click has loaded
        search_pause_ms: Pause after submitting a search
        video_search_host: Host whose searches go straight to its results URL
        video_search_url: Results URL template, ``{query}`` is URL-encoded
    """
    headless: bool = False
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    viewport_width: int = Field(default=800, ge=320, le=3840)
    viewport_height: int = Field(default=1200, ge=240, le=2160)
    user_agent: Optional[str] = DEFAULT_USER_AGENT
    navigation_timeout_ms: int = Field(default=30000, ge=0, le=600000)
    settle_timeout_ms: int = Field(default=0, ge=0, le=600000)
    click_pause_ms: int = Field(default=2000, ge=0, le=60000)
    search_pause_ms: int = Field(default=1000, ge=0, le=60000)
    video_search_host: str = "youtube.com"
    video_search_url: str = "https://www.youtube.com/results?search_query={query}"


class LLMSettings(BaseModel):
    """
    Completion service settings.
    
    Attributes:
        base_url: OpenAI-compatible API endpoint (no /v1 suffix)
        model: Default model, used when a template does not name one
        api_key: API key (``OPENAI_API_KEY`` fills it when unset)
        timeout: Request timeout in seconds
    """
    base_url: str = "https://api.openai.com"
    model: str = "gpt-4o-mini"
    api_key: Optional[SecretStr] = None
    timeout: int = Field(default=60, ge=5, le=300)


class ChunkingSettings(BaseModel):
    """
    Prompt budget settings for splitting simplified HTML.
    
    Attributes:
        token_limit: Model context size in tokens
        chars_per_token: Character estimate per token
        safety_margin: Characters kept free on top of the prompt overhead
        question_fragments: Fragments a ``question`` command is asked against
        max_ancestor_depth: How far the simplifier looks up for a linkable ancestor
        ascii_only: Strip non-ASCII characters before parsing
    """
    token_limit: int = Field(default=2048, ge=64)
    chars_per_token: int = Field(default=4, ge=1)
    safety_margin: int = Field(default=100, ge=0)
    question_fragments: int = Field(default=2, ge=1)
    max_ancestor_depth: int = Field(default=64, ge=1)
    ascii_only: bool = True


class TemplateSettings(BaseModel):
    """
    Prompt template settings.
    
    Attributes:
        directory: Directory holding ``{token}.yaml`` files (None = bundled templates)
    """
    directory: Optional[str] = None


class LoggingSettings(BaseModel):
    """
    Logging configuration.
    
    Attributes:
        level: Log level
        file: Log file path (None for console only)
        json_format: Use JSON format for the log file
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.
    
    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with WEB_COMMANDER__)
    3. Config file (YAML, read by ``ConfigLoader``)
    4. Default values
    
    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(browser=BrowserSettings(headless=True))  # Override
    """
    
    model_config = SettingsConfigDict(
        env_prefix="WEB_COMMANDER__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
    
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    templates: TemplateSettings = Field(default_factory=TemplateSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    debug: bool = False
    
    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.
        
        Args:
            overrides: Dictionary of values to override
            
        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()
        if self.llm.api_key is not None:
            current["llm"]["api_key"] = self.llm.api_key.get_secret_value()
        
        merged = deep_merge(current, overrides)
        return Settings(**merged)
