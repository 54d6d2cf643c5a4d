"""Bearer tokens (JWT) shared with the identity provider."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import Settings, get_settings
from app.domain.errors import UnauthenticatedError


def create_access_token(
    open_id: str,
    settings: Settings | None = None,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode: dict[str, Any] = dict(extra_claims or {})
    to_encode.update({"sub": open_id, "exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Validate signature and expiry and return the claims.

    Raises:
        UnauthenticatedError: invalid, expired or subject-less token.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise UnauthenticatedError("Invalid or expired token") from exc
    if not payload.get("sub"):
        raise UnauthenticatedError("Token has no subject")
    return payload
