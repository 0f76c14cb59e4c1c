"""Signed blob tokens for the local storage driver."""

import base64
import hashlib
import json
import time
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken


def _get_fernet(secret_key: str) -> Fernet:
    """Derive a Fernet instance from an arbitrary-length secret."""
    digest = hashlib.sha256(secret_key.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def sign_blob_name(
    blob_name: str, secret_key: str, expires_in: int, now: Optional[float] = None
) -> str:
    """Create a token granting read access to one blob until it expires.

    Example:
        >>> token = sign_blob_name("abc_high.jpg", "secret", expires_in=3600)
        >>> verify_blob_token(token, "abc_high.jpg", "secret")
        True
    """
    issued = time.time() if now is None else now
    payload = json.dumps({"n": blob_name, "exp": int(issued + expires_in)})
    return _get_fernet(secret_key).encrypt(payload.encode()).decode()


def verify_blob_token(
    token: str, blob_name: str, secret_key: str, now: Optional[float] = None
) -> bool:
    """Check that a token was issued for this blob and has not expired."""
    try:
        payload = json.loads(_get_fernet(secret_key).decrypt(token.encode()))
    except (InvalidToken, ValueError):
        return False

    if payload.get("n") != blob_name:
        return False

    current = time.time() if now is None else now
    return current < payload.get("exp", 0)
