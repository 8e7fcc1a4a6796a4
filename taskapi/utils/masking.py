"""Helpers for keeping secrets out of logs and console output."""

from typing import Optional

VISIBLE_PREFIX = 6


def mask_secret(value: Optional[str], visible: int = VISIBLE_PREFIX) -> Optional[str]:
    """
    Mask a secret, keeping only a short prefix.

    Args:
        value: Secret value
        visible: Number of leading characters to keep

    Returns:
        Masked value, or None when there is no secret
    """
    if not value:
        return None
    if len(value) <= visible:
        return "..."
    return value[:visible] + "..."
