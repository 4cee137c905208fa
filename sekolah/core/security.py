from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import timedelta
from typing import Optional

import jwt

from sekolah.config import get_settings
from sekolah.core.dates import utcnow
from sekolah.core.errors import NotAuthenticated

_HASH_SCHEME = "pbkdf2_sha256"


def _pbkdf2(password: str, salt: str, rounds: int) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        rounds,
    )
    return digest.hex()


def hash_password(password: str, *, rounds: Optional[int] = None, salt: Optional[str] = None) -> str:
    rounds = rounds or get_settings().PBKDF2_ROUNDS
    salt = salt or secrets.token_hex(16)
    return f"{_HASH_SCHEME}${rounds}${salt}${_pbkdf2(password, salt, rounds)}"


def verify_password(password: str, stored_hash: Optional[str]) -> bool:
    if not stored_hash:
        return False
    try:
        scheme, rounds_text, salt, expected = stored_hash.split("$", 3)
        rounds = int(rounds_text)
    except ValueError:
        return False
    if scheme != _HASH_SCHEME:
        return False
    return hmac.compare_digest(_pbkdf2(password, salt, rounds), expected)


def get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def create_access_token(user_id: int, role: str) -> Optional[str]:
    settings = get_settings()
    if not settings.JWT_SECRET:
        return None
    now = utcnow()
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRES_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    if not settings.JWT_SECRET:
        raise NotAuthenticated("JWT auth is not configured")
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.PyJWTError as exc:
        raise NotAuthenticated("Invalid token") from exc
