"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout Web Commander.
Lookups that find nothing (``NotFoundError``) are recoverable; service,
template and browser failures are fatal and end the session.
"""

from web_commander.exceptions.base import (
    CommanderError,
    ConfigurationError,
)
from web_commander.exceptions.command import (
    EmptyActionError,
    NotFoundError,
    LinkNotFoundError,
    ElementNotFoundError,
)
from web_commander.exceptions.service import (
    ServiceError,
    ServiceConnectionError,
    ServiceAuthenticationError,
    RateLimitError,
    InvalidResponseError,
)
from web_commander.exceptions.template import (
    TemplateError,
    TemplateNotFoundError,
    TemplateValidationError,
    UnreplacedVariableError,
)
from web_commander.exceptions.browser import (
    BrowserError,
    BrowserLaunchError,
    BrowserConnectionError,
    NavigationError,
)

__all__ = [
    # Base exceptions
    "CommanderError",
    "ConfigurationError",
    # Command exceptions
    "EmptyActionError",
    "NotFoundError",
    "LinkNotFoundError",
    "ElementNotFoundError",
    # Service exceptions
    "ServiceError",
    "ServiceConnectionError",
    "ServiceAuthenticationError",
    "RateLimitError",
    "InvalidResponseError",
    # Template exceptions
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateValidationError",
    "UnreplacedVariableError",
    # Browser exceptions
    "BrowserError",
    "BrowserLaunchError",
    "BrowserConnectionError",
    "NavigationError",
]
