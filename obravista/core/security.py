"""Password hashing helpers."""

from __future__ import annotations

import hashlib
import hmac


def hash_password(password: str, pepper: str = "") -> str:
    value = f"{pepper}:{password}".encode("utf-8")
    return hashlib.sha256(value).hexdigest()


def verify_password(password: str, hashed_password: str, pepper: str = "") -> bool:
    """Constant-time comparison against a stored hash."""
    candidate = hash_password(password=password, pepper=pepper)
    return hmac.compare_digest(candidate, hashed_password)
