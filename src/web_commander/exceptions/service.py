"""
Completion service exceptions.

All of these are fatal: they propagate out of the dispatcher and end the session.
"""

from web_commander.exceptions.base import CommanderError


class ServiceError(CommanderError):
    """Base exception for completion service errors."""
    pass


class ServiceConnectionError(ServiceError):
    """
    Error connecting to the completion service.
    
    Raised when the HTTP request fails or the server answers with an error status.
    """
    pass


class ServiceAuthenticationError(ServiceError):
    """
    Authentication error with the completion service.
    
    Raised when the API key is invalid or missing.
    """
    pass


class RateLimitError(ServiceError):
    """
    Rate limit exceeded.
    
    Attributes:
        retry_after: Suggested wait time in seconds before retrying
    """
    
    def __init__(self, message: str, retry_after: int | None = None):
        super().__init__(message, {"retry_after": retry_after})
        self.retry_after = retry_after


class InvalidResponseError(ServiceError):
    """
    Invalid response from the completion service.
    
    Raised when the response body cannot be parsed or is malformed.
    """
    
    def __init__(self, message: str, raw_response: str | None = None):
        super().__init__(message, {"raw_response": raw_response[:500] if raw_response else None})
        self.raw_response = raw_response
