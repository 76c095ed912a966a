"""Password hashing (bcrypt) and JWT issuance / verification (python-jose)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt

from orgchart.config import settings


# ── Password hasher ─────────────────────────────────────────────────

def _prepare_password(password: str) -> bytes:
    """Encode and truncate to 72 bytes (bcrypt limit)."""
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh salt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_prepare_password(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if *plain_password* matches *hashed_password*.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(
            _prepare_password(plain_password),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False


# ── Token issuer ────────────────────────────────────────────────────

def issue_access_token(subject: str, claims: dict[str, Any]) -> tuple[str, int]:
    """Sign an access token for *subject* carrying *claims*.

    Returns (encoded_jwt, expires_in_seconds).
    """
    now = datetime.now(timezone.utc)
    expires_in = settings.JWT_EXPIRY_HOURS * 3600
    payload = {
        **claims,
        "sub": subject,
        "type": "access",
        "iat": now,
        "exp": now + timedelta(hours=settings.JWT_EXPIRY_HOURS),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_in


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature + expiry and return the claims.

    Raises ``jose.JWTError`` (or ``ExpiredSignatureError``) on failure.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
    )
