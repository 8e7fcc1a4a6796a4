"""Authentication exceptions."""

from taskapi.core.exceptions import DomainException


class AuthenticationException(DomainException):
    """Base exception for authentication errors."""

    code = "UNAUTHORIZED"
    status_code = 401


class InvalidApiKeyException(AuthenticationException):
    """Raised when the API key header is missing or wrong."""

    def __init__(self) -> None:
        super().__init__("Invalid or missing API key")
