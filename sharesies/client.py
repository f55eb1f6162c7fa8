from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from decimal import Decimal

import requests

from sharesies.auth import Credentials, load_credentials
from sharesies.config import ClientConfig
from sharesies.models import (
    BuyQuote,
    CostRequest,
    CreateBuyRequest,
    CreateSellRequest,
    InstrumentsPage,
    InstrumentsRequest,
    Order,
    Profile,
    SellQuote,
)
from sharesies.session import Session, SessionManager
from sharesies.transport import RequestExecutor, Timeout, build_http_session

logger = logging.getLogger(__name__)

_UNSET = object()


def new_idempotency_key() -> str:
    return str(uuid.uuid4())


class SharesiesClient:
    """Authenticated client for the Sharesies trading API.

    Orders are placed in two phases: price the order (``price_buy`` /
    ``price_sell``) and hand the returned quote unchanged to ``submit_buy`` /
    ``submit_sell``. The quote is not re-validated client-side; whether a stale
    quote is honoured is up to the server.

    Examples:
        >>> client = SharesiesClient()
        >>> client.authenticate(Credentials("me@example.com", "secret"))
        >>> page = client.list_instruments(InstrumentsRequest(query="apple"))
        >>> quote = client.price_buy(page.instruments[0].id, 10)
        >>> profile = client.submit_buy(quote)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        http: requests.Session | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or ClientConfig()
        self.http = http if http is not None else build_http_session()
        self.executor = RequestExecutor(self.http, user_agent=self.config.user_agent)
        self.sessions = SessionManager(self.executor, config=self.config, clock=clock)

    @classmethod
    def from_env(cls) -> SharesiesClient:
        """Build a client from the environment and log in with its credentials."""
        client = cls(config=ClientConfig.from_env())
        client.authenticate(load_credentials())
        return client

    @property
    def session(self) -> Session | None:
        return self.sessions.session

    @property
    def credentials(self) -> Credentials | None:
        return self.sessions.credentials

    @property
    def is_authenticated(self) -> bool:
        return self.sessions.session is not None

    def _timeout(self, timeout: Timeout | object) -> Timeout:
        return self.config.timeout if timeout is _UNSET else timeout  # type: ignore[return-value]

    def authenticate(self, credentials: Credentials, timeout: Timeout | object = _UNSET) -> Profile:
        """Log in and return the account profile.

        Raises:
            AuthenticationError: If the server does not report the login as authenticated
            RequestFailedError: If the login call returns a non-200 status
        """
        session = self.sessions.authenticate(credentials, timeout=self._timeout(timeout))
        return session.profile

    def get_profile(self, timeout: Timeout | object = _UNSET) -> Profile:
        """Fetch the current account profile from the session check endpoint.

        An authenticated response replaces the session with its token. One
        that carries no token is returned with the session left unchanged.
        """
        data = self.executor.request(
            "GET", self.config.endpoints.identity_check, timeout=self._timeout(timeout)
        )
        profile = Profile.from_dict(data)
        if profile.authenticated and not profile.distill_token:
            logger.warning("Session check returned no distill_token, keeping current session")
            return profile
        self.sessions.replace(profile)
        return profile

    def list_instruments(
        self,
        request: InstrumentsRequest | None = None,
        timeout: Timeout | object = _UNSET,
    ) -> InstrumentsPage:
        """Search the instrument catalogue.

        Each call is independent: no caching and no pagination state.
        """
        timeout = self._timeout(timeout)
        session = self.sessions.ensure_fresh(timeout=timeout)
        data = self.executor.request(
            "POST",
            self.config.endpoints.instruments,
            body=request or InstrumentsRequest(),
            headers=session.headers,
            timeout=timeout,
        )
        return InstrumentsPage.from_dict(data)

    def price_buy(
        self,
        fund_id: str,
        amount: int | float | Decimal | str,
        timeout: Timeout | object = _UNSET,
    ) -> BuyQuote:
        """Ask the server what it costs to buy ``amount`` dollars of ``fund_id``."""
        order = Order.buy(amount)
        timeout = self._timeout(timeout)
        session = self.sessions.ensure_fresh(force=True, timeout=timeout)
        body = CostRequest(fund_id=fund_id, acting_as_id=session.acting_as_id, order=order)
        data = self.executor.request(
            "POST",
            self.config.endpoints.cost_buy,
            body=body,
            headers=session.headers,
            timeout=timeout,
        )
        return BuyQuote.from_dict(data)

    def submit_buy(self, quote: BuyQuote, timeout: Timeout | object = _UNSET) -> Profile:
        """Execute a priced buy order and return the updated profile."""
        timeout = self._timeout(timeout)
        session = self.sessions.ensure_fresh(force=True, timeout=timeout)
        body = CreateBuyRequest.from_quote(quote, session.acting_as_id, new_idempotency_key())
        logger.info(f"Submitting buy order for fund {quote.fund_id}")
        data = self.executor.request(
            "POST",
            self.config.endpoints.create_buy,
            body=body,
            headers=session.headers,
            timeout=timeout,
        )
        return Profile.from_dict(data, require_authenticated=False)

    def price_sell(
        self,
        fund_id: str,
        shares: int | float | Decimal | str,
        timeout: Timeout | object = _UNSET,
    ) -> SellQuote:
        """Ask the server to price selling ``shares`` units of ``fund_id``."""
        order = Order.sell(shares)
        timeout = self._timeout(timeout)
        session = self.sessions.ensure_fresh(force=True, timeout=timeout)
        body = CostRequest(fund_id=fund_id, acting_as_id=session.acting_as_id, order=order)
        data = self.executor.request(
            "POST",
            self.config.endpoints.cost_sell,
            body=body,
            headers=session.headers,
            timeout=timeout,
        )
        return SellQuote.from_dict(data)

    def submit_sell(self, quote: SellQuote, timeout: Timeout | object = _UNSET) -> Profile:
        """Execute a priced sell order and return the updated profile."""
        timeout = self._timeout(timeout)
        session = self.sessions.ensure_fresh(force=True, timeout=timeout)
        body = CreateSellRequest.from_quote(quote, session.acting_as_id, new_idempotency_key())
        logger.info(f"Submitting sell order for fund {quote.fund_id}")
        data = self.executor.request(
            "POST",
            self.config.endpoints.create_sell,
            body=body,
            headers=session.headers,
            timeout=timeout,
        )
        return Profile.from_dict(data, require_authenticated=False)
