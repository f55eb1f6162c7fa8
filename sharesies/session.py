"""Session lifecycle: login, expiry detection and re-authentication.

A :class:`Session` is an immutable value. Authenticating builds a new one and
swaps it in as a whole, so callers never observe a half-updated session.
:class:`SessionManager` is not thread-safe; use one client per concurrent
order flow or serialize access.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sharesies.auth import Credentials, build_auth_headers, decode_token, token_expiry
from sharesies.config import ClientConfig, RefreshPolicy
from sharesies.endpoints import Endpoints
from sharesies.errors import AuthenticationError, DecodeError, NotAuthenticatedError
from sharesies.models import Profile
from sharesies.transport import RequestExecutor, Timeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    token: str
    claims: dict[str, Any] = field(repr=False)
    expires_at: datetime | None
    profile: Profile = field(repr=False)

    @classmethod
    def from_profile(cls, profile: Profile) -> Session:
        """Build a session from an authenticated profile.

        Raises DecodeError if the profile carries no decodable token.
        """
        if not profile.distill_token:
            raise DecodeError("Authenticated profile is missing its distill_token")
        claims = decode_token(profile.distill_token)
        return cls(
            token=profile.distill_token,
            claims=claims,
            expires_at=token_expiry(claims),
            profile=profile,
        )

    @property
    def acting_as_id(self) -> str:
        """Id of the primary account identity, used as the actor on orders."""
        if not self.profile.user_list:
            raise AuthenticationError("Profile has no user identities to act as")
        return self.profile.user_list[0].id

    @property
    def headers(self) -> dict[str, str]:
        return build_auth_headers(self.token)

    def is_expired(self, now: float, leeway: float = 0.0) -> bool:
        """Tokens without an exp claim never expire."""
        if self.expires_at is None:
            return False
        return self.expires_at.timestamp() - leeway <= now


class SessionManager:
    """Owns the credentials and the current session for one client."""

    def __init__(
        self,
        executor: RequestExecutor,
        config: ClientConfig | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.executor = executor
        self.config = config or ClientConfig()
        self.clock = clock
        self._credentials: Credentials | None = None
        self._session: Session | None = None

    @property
    def endpoints(self) -> Endpoints:
        return self.config.endpoints

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    def authenticate(self, credentials: Credentials, timeout: Timeout = None) -> Session:
        """Log in and install a new session.

        Nothing is installed unless the server reports the login as
        authenticated and its token decodes.
        """
        body = {"email": credentials.username, "password": credentials.password, "remember": True}
        data = self.executor.request(
            "POST", self.endpoints.identity_login, body=body, timeout=timeout
        )
        session = self._session_from_response(data, "Login")
        self._credentials = credentials
        self._session = session
        logger.info(f"Authenticated as {credentials.username}")
        return session

    def reauthenticate(self, timeout: Timeout = None) -> Session:
        """Re-authenticate with the stored password for the primary identity.

        On failure the current session is cleared when
        ``config.clear_session_on_reauth_failure`` is set, otherwise kept.
        """
        current = self._require_session()
        if self._credentials is None:
            raise NotAuthenticatedError("No stored credentials to re-authenticate with")

        body = {"password": self._credentials.password, "acting_as_id": current.acting_as_id}
        try:
            data = self.executor.request(
                "POST", self.endpoints.identity_reauthenticate, body=body, timeout=timeout
            )
            session = self._session_from_response(data, "Re-authentication")
        except Exception as e:
            if self.config.clear_session_on_reauth_failure:
                logger.warning(f"Re-authentication failed, clearing session: {e}")
                self._session = None
            else:
                logger.warning(f"Re-authentication failed, keeping previous session: {e}")
            raise

        self._session = session
        logger.info("Re-authenticated session")
        return session

    def ensure_fresh(self, force: bool = False, timeout: Timeout = None) -> Session:
        """Return a session fit for a privileged call.

        Re-authenticates when forced, when the refresh policy is ``ALWAYS`` or
        when the token has expired.
        """
        session = self._require_session()
        if force or self.config.refresh_policy is RefreshPolicy.ALWAYS:
            return self.reauthenticate(timeout=timeout)
        if session.is_expired(self.clock(), self.config.expiry_leeway):
            logger.info("Bearer token expired, re-authenticating")
            return self.reauthenticate(timeout=timeout)
        return session

    def replace(self, profile: Profile) -> Session:
        """Install a session built from an authenticated profile."""
        if not profile.authenticated:
            raise AuthenticationError("Profile is not authenticated")
        session = Session.from_profile(profile)
        self._session = session
        return session

    def clear(self) -> None:
        self._session = None

    def _require_session(self) -> Session:
        if self._session is None:
            raise NotAuthenticatedError("Not authenticated; call authenticate() first")
        return self._session

    def _session_from_response(self, data: Any, action: str) -> Session:
        profile = Profile.from_dict(data)
        if not profile.authenticated:
            raise AuthenticationError(f"{action} failed: server reported authenticated=false")
        return Session.from_profile(profile)
