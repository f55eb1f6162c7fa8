"""HTTP plumbing shared by every Sharesies call."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from sharesies.config import DEFAULT_USER_AGENT
from sharesies.errors import ConfigurationError, DecodeError, RequestFailedError

logger = logging.getLogger(__name__)

Timeout = float | tuple[float, float] | None


def build_http_session() -> requests.Session:
    """Return a plain session; its cookie jar keeps server affinity between calls.

    No retry adapter is mounted: every failure surfaces to the caller.
    """
    return requests.Session()


class RequestExecutor:
    """Executes JSON requests with the fixed Sharesies headers.

    Every response other than HTTP 200 is a failure. Transport errors raised
    by ``requests`` are not wrapped.
    """

    def __init__(self, http: requests.Session, user_agent: str = DEFAULT_USER_AGENT):
        if getattr(http, "cookies", None) is None:
            raise ConfigurationError("HTTP session must have a cookie jar defined")
        self.http = http
        self.base_headers = {
            "User-Agent": user_agent,
            "Accept": "*/*",
            "Content-Type": "application/json",
        }

    def request(
        self,
        method: str,
        url: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
        timeout: Timeout = None,
    ) -> Any:
        """Send a request and return the decoded JSON response body."""
        method = method.upper()
        data = None
        if method != "GET":
            payload = body.to_dict() if hasattr(body, "to_dict") else body
            data = json.dumps(payload)

        all_headers = dict(self.base_headers)
        all_headers.update(headers or {})

        res = self.http.request(method, url, data=data, headers=all_headers, timeout=timeout)
        logger.debug(f"{method} {url} -> {res.status_code}")
        if res.status_code != 200:
            raise RequestFailedError(res.status_code, method, url)

        try:
            return json.loads(res.content)
        except ValueError as e:
            raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e
