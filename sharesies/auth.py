from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import jwt

from sharesies.errors import AuthenticationError, DecodeError
from sharesies.utils.env import load_env_file_if_present


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


def load_credentials(
    username_key: str = "SHARESIES_USERNAME",
    password_key: str = "SHARESIES_PASSWORD",
    dotenv: bool = True,
) -> Credentials:
    """Return Sharesies login credentials from environment or .env.

    Raises AuthenticationError if either value is missing.
    """
    if dotenv:
        load_env_file_if_present()
    username = os.getenv(username_key)
    password = os.getenv(password_key)
    pairs = ((username_key, username), (password_key, password))
    missing = [key for key, value in pairs if not value]
    if missing:
        raise AuthenticationError(
            f"Missing credentials. Set {', '.join(missing)} in environment or .env"
        )
    return Credentials(username=username, password=password)  # type: ignore[arg-type]


def decode_token(token: str) -> dict[str, Any]:
    """Decode a bearer token's claims without verifying its signature.

    The token is only inspected for its expiry, never trusted for
    authorization decisions.
    """
    try:
        return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.InvalidTokenError as e:
        raise DecodeError(f"Could not decode bearer token: {e}") from e


def token_expiry(claims: dict[str, Any]) -> datetime | None:
    """Return the ``exp`` claim as an aware UTC datetime, or None if absent."""
    exp = claims.get("exp")
    if exp is None:
        return None
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise DecodeError(f"Token exp claim is not a timestamp: {exp!r}")
    return datetime.fromtimestamp(exp, tz=timezone.utc)


def build_auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
