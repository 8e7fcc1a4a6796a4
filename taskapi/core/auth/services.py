"""Authentication services."""

import logging
import secrets
from typing import Optional

from taskapi.utils.masking import mask_secret
from .exceptions import InvalidApiKeyException

logger = logging.getLogger("taskapi.auth")


class ApiKeyAuthenticator:
    """
    Validates the shared API key sent by clients.

    Keys are compared in constant time.
    """

    def __init__(self, api_key: str) -> None:
        """
        Initialize authenticator.

        Args:
            api_key: Expected key value
        """
        if not api_key:
            raise ValueError("API key cannot be empty")
        self._api_key = api_key

    def is_valid(self, candidate: Optional[str]) -> bool:
        """Check a candidate key without raising."""
        if not candidate:
            return False
        return secrets.compare_digest(candidate.encode("utf-8"), self._api_key.encode("utf-8"))

    def authenticate(self, candidate: Optional[str]) -> None:
        """
        Validate a candidate key.

        Args:
            candidate: Value of the X-API-Key header

        Raises:
            InvalidApiKeyException: If the key is missing or does not match
        """
        if not self.is_valid(candidate):
            logger.warning(f"Rejected API key {mask_secret(candidate) or '<missing>'}")
            raise InvalidApiKeyException()
