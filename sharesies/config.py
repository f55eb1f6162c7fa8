"""Client configuration.

Settings can be given directly or read from the environment (and a ``.env``
file) with :meth:`ClientConfig.from_env`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum

from sharesies.endpoints import APP_URL, DATA_URL, Endpoints
from sharesies.errors import ConfigurationError
from sharesies.utils.env import load_env_file_if_present

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 Firefox/71.0"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class RefreshPolicy(str, Enum):
    """When the session gate re-authenticates before a privileged call."""

    EXPIRY = "expiry"  # only once the token's exp claim has passed
    ALWAYS = "always"  # before every privileged call


@dataclass
class ClientConfig:
    app_url: str = APP_URL
    data_url: str = DATA_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float | tuple[float, float] | None = None
    refresh_policy: RefreshPolicy = RefreshPolicy.EXPIRY
    expiry_leeway: float = 30.0
    clear_session_on_reauth_failure: bool = True
    endpoints: Endpoints = field(init=False, repr=False)

    def __post_init__(self) -> None:
        try:
            self.refresh_policy = RefreshPolicy(self.refresh_policy)
        except ValueError:
            raise ConfigurationError(f"Unknown refresh policy: {self.refresh_policy!r}") from None
        if self.expiry_leeway < 0:
            raise ConfigurationError("expiry_leeway must not be negative")
        self.endpoints = Endpoints(app_url=self.app_url, data_url=self.data_url)

    @classmethod
    def from_env(cls, prefix: str = "SHARESIES_", dotenv: bool = True) -> ClientConfig:
        """Build a config from ``<prefix>*`` environment variables.

        Unset variables keep their defaults. Raises ConfigurationError on
        values that cannot be parsed.
        """
        if dotenv:
            load_env_file_if_present()

        kwargs: dict[str, object] = {}
        for name in ("app_url", "data_url", "user_agent", "refresh_policy"):
            value = os.getenv(f"{prefix}{name.upper()}")
            if value:
                kwargs[name] = value.strip().lower() if name == "refresh_policy" else value

        timeout = os.getenv(f"{prefix}TIMEOUT")
        if timeout:
            kwargs["timeout"] = _parse_float(f"{prefix}TIMEOUT", timeout)

        leeway = os.getenv(f"{prefix}EXPIRY_LEEWAY")
        if leeway:
            kwargs["expiry_leeway"] = _parse_float(f"{prefix}EXPIRY_LEEWAY", leeway)

        clear = os.getenv(f"{prefix}CLEAR_SESSION_ON_REAUTH_FAILURE")
        if clear:
            kwargs["clear_session_on_reauth_failure"] = _parse_bool(
                f"{prefix}CLEAR_SESSION_ON_REAUTH_FAILURE", clear
            )

        config = cls(**kwargs)  # type: ignore[arg-type]
        logger.debug(f"Loaded client configuration from environment: {config}")
        return config


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")
