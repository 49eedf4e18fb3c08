"""Token helpers for the external authentication collaborator."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import jwt

from dearblueno.core.settings import settings


def create_access_token(subject: int | str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token whose subject is the user identifier."""
    to_encode: dict[str, object] = {"sub": str(subject)}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str | None:
    """Return the token subject, raising ``JWTError`` for invalid tokens."""
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    subject = payload.get("sub")
    return str(subject) if subject is not None else None
