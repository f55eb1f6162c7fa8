from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any
from unittest.mock import Mock

import jwt
import pytest

from sharesies.client import SharesiesClient
from sharesies.config import ClientConfig

NOW = 1_700_000_000
TOKEN_SECRET = "unit-test-signing-key-0123456789abcdef"
USER_ID = "USER_ID"
FUND_ID = "b8b7ef58-b270-4762-a256-9d68aebc3e23"

LOGIN_URL = "https://app.sharesies.nz/api/identity/login"
CHECK_URL = "https://app.sharesies.nz/api/identity/check"
REAUTH_URL = "https://app.sharesies.nz/api/identity/reauthenticate"
INSTRUMENTS_URL = "https://data.sharesies.nz/api/v1/instruments"
COST_BUY_URL = "https://app.sharesies.nz/api/order/cost-buy"
CREATE_BUY_URL = "https://app.sharesies.nz/api/order/create-buy"
COST_SELL_URL = "https://app.sharesies.nz/api/order/cost-sell"
CREATE_SELL_URL = "https://app.sharesies.nz/api/order/create-sell"


def make_token(exp: int | None = NOW + 3600, **claims: Any) -> str:
    payload = dict(claims)
    if exp is not None:
        payload["exp"] = exp
    return jwt.encode(payload, TOKEN_SECRET, algorithm="HS256")


def make_response(status_code: int = 200, body: Any = None, content: bytes | None = None) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.content = content if content is not None else json.dumps(body).encode()
    return response


def profile_payload(token: str | None = None, authenticated: bool = True, **overrides: Any) -> dict:
    """Profile payload shaped like the login/check responses."""
    payload = {
        "authenticated": authenticated,
        "distill_token": token if token is not None else make_token(),
        "type": "identity",
        "flags": ["us_equities"],
        "nzx_is_open": True,
        "user": {
            "id": USER_ID,
            "email": "username@example.com",
            "preferred_name": "Test",
            "home_currency": "nzd",
            "jurisdiction": "nz",
            "state": "active",
            "account_frozen": False,
            "account_restricted": False,
            "holding_balance": "0.00",
            "wallet_balances": {"nzd": "120.50", "aud": "0.00", "usd": "3.10"},
        },
        "user_list": [
            {"id": USER_ID, "preferred_name": "Test", "primary": True, "state": "active"},
            {"id": "KID_ID", "preferred_name": "Kid", "primary": False, "state": "active"},
        ],
        "portfolio": [
            {
                "fund_id": FUND_ID,
                "currency": "nzd",
                "shares": "1.234567",
                "value": "15.20",
                "contribution": "12.00",
                "return_dollars": "3.20",
                "return_percent": "26.67",
                "holding_type": "normal",
            }
        ],
    }
    payload.update(overrides)
    return payload


@dataclass
class Call:
    method: str
    url: str
    body: Any
    headers: dict[str, str]
    timeout: Any


class StubServer:
    """Stand-in for ``requests.Session.request`` that answers by method and URL."""

    def __init__(self):
        self.routes: dict[tuple[str, str], list[Mock]] = {}
        self.calls: list[Call] = []

    def add(self, method: str, url: str, body: Any = None, status_code: int = 200, content=None):
        self.routes.setdefault((method, url), []).append(make_response(status_code, body, content))
        return self

    def __call__(self, method, url, data=None, headers=None, timeout=None):
        self.calls.append(
            Call(method, url, json.loads(data) if data else None, headers or {}, timeout)
        )
        queue = self.routes.get((method, url))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        # Last response for a route is reused once earlier ones are consumed
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls_to(self, url: str) -> list[Call]:
        return [call for call in self.calls if call.url == url]

    @property
    def urls(self) -> list[str]:
        return [call.url for call in self.calls]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove SHARESIES_* variables so tests do not see the developer's setup."""
    for key in list(os.environ):
        if key.startswith("SHARESIES_"):
            monkeypatch.delenv(key, raising=False)
    yield
    # .env loading writes to os.environ directly
    for key in list(os.environ):
        if key.startswith("SHARESIES_"):
            os.environ.pop(key)


@pytest.fixture
def stub():
    return StubServer()


@pytest.fixture
def client(stub):
    """Client whose HTTP session is answered by ``stub``, with a frozen clock."""
    client = SharesiesClient(config=ClientConfig(), clock=lambda: NOW)
    client.http.request = stub
    return client


@pytest.fixture
def login_ok(stub):
    stub.add("POST", LOGIN_URL, profile_payload())
    return stub


@pytest.fixture
def reauth_ok(stub):
    stub.add("POST", REAUTH_URL, profile_payload())
    return stub


@pytest.fixture
def instruments_payload():
    return {
        "total": 2,
        "currentPage": 1,
        "resultsPerPage": 60,
        "numberOfPages": 1,
        "instruments": [
            {
                "id": "a1b2c3",
                "urlSlug": "apple",
                "instrumentType": "equity",
                "symbol": "AAPL",
                "kidsRecommended": False,
                "isVolatile": False,
                "name": "Apple",
                "description": "Consumer electronics",
                "categories": ["Technology"],
                "logos": {"wide": "w.png", "thumb": "t.png", "micro": "m.png"},
                "riskRating": 5,
                "marketPrice": "189.950000",
                "marketLastCheck": "2023-11-14T22:00:00Z",
                "tradingStatus": "active",
                "exchangeCountry": "USA",
                "peRatio": "31.20",
                "marketCap": 2950000000000,
                "websiteUrl": "https://www.apple.com",
                "exchange": "NASDAQ",
                "legacyImageUrl": None,
            },
            {
                "id": "d4e5f6",
                "symbol": "APL",
                "name": "Apple Pie Ltd",
                "instrumentType": "equity",
                "exchange": "NZX",
            },
        ],
    }


@pytest.fixture
def cost_buy_payload():
    return {
        "type": "dollar_market",
        "fund_id": FUND_ID,
        "expected_fee": "0.05",
        "total_cost": "10.00",
        "request": {"type": "dollar_market", "currency_amount": "10.00"},
        "payment_breakdown": [
            {"currency": "nzd", "target_amount": "10.00", "type": "direct"},
        ],
    }


@pytest.fixture
def cost_sell_payload():
    return {
        "type": "share_market",
        "fund_id": FUND_ID,
        "request": {"type": "share_market", "share_amount": "2.500000"},
    }
