"""
Bearer token authentication for Conduit.

Every ``/api/requests`` route resolves the calling user from an
``Authorization: Bearer <jwt>`` header signed with ``CONDUIT_JWT_SECRET``.
The user id is taken from the token's ``userId`` claim.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Header

from .config import Settings, get_settings
from .exceptions import AuthConfigurationError, UnauthorizedError


logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _require_secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        logger.error("CONDUIT_JWT_SECRET is not set; bearer tokens cannot be verified")
        raise AuthConfigurationError()
    return settings.jwt_secret


def create_access_token(
    user_id: str,
    settings: Settings,
    email: str | None = None,
    expires_in: int | None = None
) -> str:
    """
    Issue a signed token identifying ``user_id``.

    Args:
        user_id: Value of the ``userId`` claim
        settings: Settings providing the secret and algorithm
        email: Optional ``email`` claim
        expires_in: Lifetime in seconds, defaults to ``settings.jwt_expires_in``

    Returns:
        The encoded JWT
    """
    now = datetime.now(timezone.utc)
    lifetime = settings.jwt_expires_in if expires_in is None else expires_in
    claims = {"userId": user_id, "iat": now, "exp": now + timedelta(seconds=lifetime)}
    if email is not None:
        claims["email"] = email
    return jwt.encode(claims, _require_secret(settings), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> str:
    """
    Verify a token and return its ``userId`` claim.

    Raises:
        UnauthorizedError: "Token expired" or "Invalid token"
    """
    secret = _require_secret(settings)
    try:
        claims = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    user_id = claims.get("userId")
    if not isinstance(user_id, str) or not user_id:
        raise UnauthorizedError("Invalid token")
    return user_id


def get_current_user_id(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings)
) -> str:
    """
    Dependency function for FastAPI returning the calling user's id.

    Raises:
        UnauthorizedError: "No token provided", "Invalid token" or "Token expired"
        AuthConfigurationError: If no JWT secret is configured
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError("No token provided")
    return decode_access_token(authorization[len(BEARER_PREFIX):], settings)
