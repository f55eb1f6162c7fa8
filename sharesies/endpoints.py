"""Sharesies endpoint URLs."""

from __future__ import annotations

from dataclasses import dataclass

APP_URL = "https://app.sharesies.nz"
DATA_URL = "https://data.sharesies.nz"


@dataclass(frozen=True)
class Endpoints:
    """Absolute endpoint URLs derived from the app and data base URLs."""

    app_url: str = APP_URL
    data_url: str = DATA_URL

    def _app(self, path: str) -> str:
        return f"{self.app_url.rstrip('/')}{path}"

    @property
    def identity_login(self) -> str:
        return self._app("/api/identity/login")

    @property
    def identity_check(self) -> str:
        return self._app("/api/identity/check")

    @property
    def identity_reauthenticate(self) -> str:
        return self._app("/api/identity/reauthenticate")

    @property
    def instruments(self) -> str:
        return f"{self.data_url.rstrip('/')}/api/v1/instruments"

    @property
    def cost_buy(self) -> str:
        return self._app("/api/order/cost-buy")

    @property
    def create_buy(self) -> str:
        return self._app("/api/order/create-buy")

    @property
    def cost_sell(self) -> str:
        return self._app("/api/order/cost-sell")

    @property
    def create_sell(self) -> str:
        return self._app("/api/order/create-sell")
