"""Request and response records for the Sharesies API.

The upstream schema is undocumented, so records only require the fields the
client relies on. Everything else is optional, and each decoded record keeps
the ``raw`` payload it came from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from sharesies.errors import DecodeError

ORDER_TYPE_DOLLAR_MARKET = "dollar_market"
ORDER_TYPE_SHARE_MARKET = "share_market"

_CURRENCY_QUANTUM = Decimal("0.01")
_SHARE_QUANTUM = Decimal("0.000001")


def _format_amount(amount: int | float | Decimal | str, quantum: Decimal, what: str) -> str:
    if isinstance(amount, bool):
        raise ValueError(f"{what} must be a number, got {amount!r}")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"{what} must be a number, got {amount!r}") from None
    if not value.is_finite():
        raise ValueError(f"{what} must be a positive finite number, got {amount!r}")
    # Checked after rounding so a positive amount never goes out as zero
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded <= 0:
        raise ValueError(f"{what} must be a positive finite number, got {amount!r}")
    return format(rounded, "f")


def format_currency_amount(amount: int | float | Decimal | str) -> str:
    """Format a currency amount with exactly two decimal places (``10`` -> ``"10.00"``)."""
    return _format_amount(amount, _CURRENCY_QUANTUM, "Currency amount")


def format_share_amount(amount: int | float | Decimal | str) -> str:
    """Format a share quantity with exactly six decimal places (``2.5`` -> ``"2.500000"``)."""
    return _format_amount(amount, _SHARE_QUANTUM, "Share amount")


def _mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected {what} to be a JSON object, got {type(data).__name__}")
    return data


def _field(
    data: dict[str, Any],
    key: str,
    kind: type | tuple[type, ...],
    what: str,
    required: bool = False,
) -> Any:
    value = data.get(key)
    if value is None:
        if required:
            raise DecodeError(f"{what} is missing required field '{key}'")
        return None
    kinds = kind if isinstance(kind, tuple) else (kind,)
    if not isinstance(value, kinds) or (isinstance(value, bool) and bool not in kinds):
        raise DecodeError(f"{what} field '{key}' has unexpected type {type(value).__name__}")
    return value


def _records(
    data: dict[str, Any], key: str, record: Any, what: str, required: bool = False
) -> list[Any]:
    items = _field(data, key, list, what, required=required)
    return [record.from_dict(item) for item in items or []]


# Profile


@dataclass
class UserIdentity:
    """One of the account identities available under a login."""

    id: str
    preferred_name: str | None = None
    primary: bool | None = None
    state: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> UserIdentity:
        data = _mapping(data, "user identity")
        what = "User identity"
        return cls(
            id=_field(data, "id", str, what, required=True),
            preferred_name=_field(data, "preferred_name", str, what),
            primary=_field(data, "primary", bool, what),
            state=_field(data, "state", str, what),
            raw=data,
        )


@dataclass
class WalletBalances:
    nzd: str | None = None
    aud: str | None = None
    usd: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WalletBalances:
        data = _mapping(data, "wallet balances")
        return cls(nzd=data.get("nzd"), aud=data.get("aud"), usd=data.get("usd"))


@dataclass
class User:
    id: str | None = None
    email: str | None = None
    preferred_name: str | None = None
    home_currency: str | None = None
    jurisdiction: str | None = None
    state: str | None = None
    account_frozen: bool | None = None
    account_restricted: bool | None = None
    holding_balance: str | None = None
    wallet_balances: WalletBalances | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> User:
        data = _mapping(data, "user")
        what = "User"
        wallet = data.get("wallet_balances")
        return cls(
            id=_field(data, "id", str, what),
            email=_field(data, "email", str, what),
            preferred_name=_field(data, "preferred_name", str, what),
            home_currency=_field(data, "home_currency", str, what),
            jurisdiction=_field(data, "jurisdiction", str, what),
            state=_field(data, "state", str, what),
            account_frozen=_field(data, "account_frozen", bool, what),
            account_restricted=_field(data, "account_restricted", bool, what),
            holding_balance=_field(data, "holding_balance", str, what),
            wallet_balances=WalletBalances.from_dict(wallet) if wallet is not None else None,
            raw=data,
        )


@dataclass
class Holding:
    """A position in the account portfolio."""

    fund_id: str
    currency: str | None = None
    shares: str | None = None
    value: str | None = None
    contribution: str | None = None
    return_dollars: str | None = None
    return_percent: str | None = None
    holding_type: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> Holding:
        data = _mapping(data, "portfolio holding")
        what = "Portfolio holding"
        return cls(
            fund_id=_field(data, "fund_id", str, what, required=True),
            currency=_field(data, "currency", str, what),
            shares=_field(data, "shares", str, what),
            value=_field(data, "value", str, what),
            contribution=_field(data, "contribution", str, what),
            return_dollars=_field(data, "return_dollars", str, what),
            return_percent=_field(data, "return_percent", str, what),
            holding_type=_field(data, "holding_type", str, what),
            raw=data,
        )


@dataclass
class Profile:
    """Account snapshot returned by login, session check and order creation."""

    authenticated: bool | None
    distill_token: str | None = None
    user_list: list[UserIdentity] = field(default_factory=list)
    type: str | None = None
    flags: list[str] = field(default_factory=list)
    nzx_is_open: bool | None = None
    user: User | None = None
    portfolio: list[Holding] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any, require_authenticated: bool = True) -> Profile:
        """Decode a profile payload.

        Identity responses must say whether the caller is authenticated.
        Post-trade snapshots may omit the flag, so pass
        ``require_authenticated=False`` for those; ``authenticated`` is then None.
        """
        data = _mapping(data, "profile")
        what = "Profile"
        user = data.get("user")
        return cls(
            authenticated=_field(
                data, "authenticated", bool, what, required=require_authenticated
            ),
            distill_token=_field(data, "distill_token", str, what),
            user_list=_records(data, "user_list", UserIdentity, what),
            type=_field(data, "type", str, what),
            flags=list(_field(data, "flags", list, what) or []),
            nzx_is_open=_field(data, "nzx_is_open", bool, what),
            user=User.from_dict(user) if user is not None else None,
            portfolio=_records(data, "portfolio", Holding, what),
            raw=data,
        )


# Instruments


@dataclass
class InstrumentsRequest:
    """Search criteria for the instrument catalogue."""

    page: int = 1
    per_page: int = 60
    sort: str = "relevance"
    price_change_time: str = "1y"
    query: str = ""
    instruments: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "page": self.page,
            "perPage": self.per_page,
            "sort": self.sort,
            "priceChangeTime": self.price_change_time,
            "query": self.query,
        }
        if self.instruments:
            body["instruments"] = list(self.instruments)
        return body


@dataclass
class Instrument:
    id: str
    symbol: str | None = None
    name: str | None = None
    url_slug: str | None = None
    instrument_type: str | None = None
    description: str | None = None
    categories: list[str] = field(default_factory=list)
    risk_rating: int | None = None
    market_price: str | None = None
    market_last_check: str | None = None
    trading_status: str | None = None
    exchange: str | None = None
    exchange_country: str | None = None
    pe_ratio: str | None = None
    market_cap: int | float | None = None
    website_url: str | None = None
    logos: dict[str, str] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> Instrument:
        data = _mapping(data, "instrument")
        what = "Instrument"
        return cls(
            id=_field(data, "id", str, what, required=True),
            symbol=_field(data, "symbol", str, what),
            name=_field(data, "name", str, what),
            url_slug=_field(data, "urlSlug", str, what),
            instrument_type=_field(data, "instrumentType", str, what),
            description=_field(data, "description", str, what),
            categories=list(_field(data, "categories", list, what) or []),
            risk_rating=_field(data, "riskRating", int, what),
            market_price=_field(data, "marketPrice", str, what),
            market_last_check=_field(data, "marketLastCheck", str, what),
            trading_status=_field(data, "tradingStatus", str, what),
            exchange=_field(data, "exchange", str, what),
            exchange_country=_field(data, "exchangeCountry", str, what),
            pe_ratio=_field(data, "peRatio", str, what),
            market_cap=_field(data, "marketCap", (int, float), what),
            website_url=_field(data, "websiteUrl", str, what),
            logos=dict(_field(data, "logos", dict, what) or {}),
            raw=data,
        )


@dataclass
class InstrumentsPage:
    """One page of instrument search results plus pagination metadata."""

    instruments: list[Instrument]
    total: int = 0
    current_page: int = 0
    results_per_page: int = 0
    number_of_pages: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> InstrumentsPage:
        data = _mapping(data, "instruments response")
        what = "Instruments response"
        return cls(
            instruments=_records(data, "instruments", Instrument, what, required=True),
            total=_field(data, "total", int, what) or 0,
            current_page=_field(data, "currentPage", int, what) or 0,
            results_per_page=_field(data, "resultsPerPage", int, what) or 0,
            number_of_pages=_field(data, "numberOfPages", int, what) or 0,
        )


# Orders


@dataclass
class Order:
    """Order parameters: a currency amount for buys, a share amount for sells."""

    type: str
    currency_amount: str | None = None
    share_amount: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def buy(cls, amount: int | float | Decimal | str) -> Order:
        return cls(type=ORDER_TYPE_DOLLAR_MARKET, currency_amount=format_currency_amount(amount))

    @classmethod
    def sell(cls, shares: int | float | Decimal | str) -> Order:
        return cls(type=ORDER_TYPE_SHARE_MARKET, share_amount=format_share_amount(shares))

    @classmethod
    def from_dict(cls, data: Any) -> Order:
        data = _mapping(data, "order")
        what = "Order"
        return cls(
            type=_field(data, "type", str, what, required=True),
            currency_amount=_field(data, "currency_amount", str, what),
            share_amount=_field(data, "share_amount", str, what),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        body: dict[str, Any] = {"type": self.type}
        if self.currency_amount is not None:
            body["currency_amount"] = self.currency_amount
        if self.share_amount is not None:
            body["share_amount"] = self.share_amount
        return body


@dataclass
class PaymentBreakdown:
    currency: str | None = None
    target_amount: str | None = None
    type: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> PaymentBreakdown:
        data = _mapping(data, "payment breakdown")
        what = "Payment breakdown"
        return cls(
            currency=_field(data, "currency", str, what),
            target_amount=_field(data, "target_amount", str, what),
            type=_field(data, "type", str, what),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return {"currency": self.currency, "target_amount": self.target_amount, "type": self.type}


@dataclass
class CostRequest:
    """Body of a cost-buy or cost-sell call."""

    fund_id: str
    acting_as_id: str
    order: Order

    def to_dict(self) -> dict[str, Any]:
        return {
            "fund_id": self.fund_id,
            "acting_as_id": self.acting_as_id,
            "order": self.order.to_dict(),
        }


@dataclass
class BuyQuote:
    """A priced buy order. Pass it unchanged to ``submit_buy``."""

    fund_id: str
    request: Order
    payment_breakdown: list[PaymentBreakdown]
    expected_fee: str
    total_cost: str | None = None
    type: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> BuyQuote:
        data = _mapping(data, "cost-buy response")
        what = "Cost-buy response"
        return cls(
            fund_id=_field(data, "fund_id", str, what, required=True),
            request=Order.from_dict(_field(data, "request", dict, what, required=True)),
            payment_breakdown=_records(
                data, "payment_breakdown", PaymentBreakdown, what, required=True
            ),
            expected_fee=_field(data, "expected_fee", str, what, required=True),
            total_cost=_field(data, "total_cost", str, what),
            type=_field(data, "type", str, what),
            raw=data,
        )


@dataclass
class SellQuote:
    """A priced sell order. Pass it unchanged to ``submit_sell``."""

    fund_id: str
    request: Order
    type: str | None = None
    expected_fee: str | None = None
    payment_breakdown: list[PaymentBreakdown] | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> SellQuote:
        data = _mapping(data, "cost-sell response")
        what = "Cost-sell response"
        breakdown = None
        if data.get("payment_breakdown") is not None:
            breakdown = _records(data, "payment_breakdown", PaymentBreakdown, what)
        return cls(
            fund_id=_field(data, "fund_id", str, what, required=True),
            request=Order.from_dict(_field(data, "request", dict, what, required=True)),
            type=_field(data, "type", str, what),
            expected_fee=_field(data, "expected_fee", str, what),
            payment_breakdown=breakdown,
            raw=data,
        )


@dataclass
class CreateBuyRequest:
    fund_id: str
    acting_as_id: str
    order: Order
    payment_breakdown: list[PaymentBreakdown]
    expected_fee: str
    idempotency_key: str

    @classmethod
    def from_quote(
        cls, quote: BuyQuote, acting_as_id: str, idempotency_key: str
    ) -> CreateBuyRequest:
        return cls(
            fund_id=quote.fund_id,
            acting_as_id=acting_as_id,
            order=quote.request,
            payment_breakdown=quote.payment_breakdown,
            expected_fee=quote.expected_fee,
            idempotency_key=idempotency_key,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "fund_id": self.fund_id,
            "acting_as_id": self.acting_as_id,
            "order": self.order.to_dict(),
            "idempotency_key": self.idempotency_key,
            "payment_breakdown": [item.to_dict() for item in self.payment_breakdown],
            "expected_fee": self.expected_fee,
        }


@dataclass
class CreateSellRequest:
    fund_id: str
    acting_as_id: str
    order: Order
    idempotency_key: str
    expected_fee: str | None = None
    payment_breakdown: list[PaymentBreakdown] | None = None

    @classmethod
    def from_quote(
        cls, quote: SellQuote, acting_as_id: str, idempotency_key: str
    ) -> CreateSellRequest:
        return cls(
            fund_id=quote.fund_id,
            acting_as_id=acting_as_id,
            order=quote.request,
            idempotency_key=idempotency_key,
            expected_fee=quote.expected_fee,
            payment_breakdown=quote.payment_breakdown,
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "fund_id": self.fund_id,
            "acting_as_id": self.acting_as_id,
            "order": self.order.to_dict(),
            "idempotency_key": self.idempotency_key,
        }
        if self.payment_breakdown is not None:
            body["payment_breakdown"] = [item.to_dict() for item in self.payment_breakdown]
        if self.expected_fee is not None:
            body["expected_fee"] = self.expected_fee
        return body
