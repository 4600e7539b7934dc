"""
Prompt template exceptions.
"""

from typing import List

from web_commander.exceptions.base import CommanderError


class TemplateError(CommanderError):
    """Base exception for prompt template errors."""
    pass


class TemplateNotFoundError(TemplateError):
    """No template file exists for a token."""
    
    def __init__(self, token: str, path: str | None = None):
        super().__init__(f"No template found for token {token}", {"path": path})
        self.token = token
        self.path = path


class TemplateValidationError(TemplateError):
    """A template file is missing a required field or has an invalid value."""
    
    def __init__(self, message: str, token: str | None = None):
        super().__init__(message, {"token": token})
        self.token = token


class UnreplacedVariableError(TemplateError):
    """
    Rendering left ``{{variables}}`` without a value.
    
    Raised before the prompt is sent anywhere.
    
    Attributes:
        variables: Names of the placeholders that had no value
    """
    
    def __init__(self, variables: List[str], token: str | None = None):
        names = ", ".join("{{" + name + "}}" for name in variables)
        super().__init__(f"Required prompt variables missing: {names}", {"token": token})
        self.variables = variables
        self.token = token
