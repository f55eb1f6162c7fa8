"""Client for the Sharesies share-trading API.

This package provides:
- Login with username/password and transparent re-authentication
- Instrument catalogue search
- Two-phase buy/sell orders (price, then submit the returned quote)
"""

from sharesies.auth import Credentials, load_credentials
from sharesies.client import SharesiesClient
from sharesies.config import ClientConfig, RefreshPolicy
from sharesies.errors import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    NotAuthenticatedError,
    RequestFailedError,
    SharesiesError,
)
from sharesies.models import BuyQuote, InstrumentsPage, InstrumentsRequest, Profile, SellQuote

__all__ = [
    "SharesiesClient",
    "ClientConfig",
    "RefreshPolicy",
    "Credentials",
    "load_credentials",
    "InstrumentsRequest",
    "InstrumentsPage",
    "BuyQuote",
    "SellQuote",
    "Profile",
    "SharesiesError",
    "ConfigurationError",
    "AuthenticationError",
    "NotAuthenticatedError",
    "RequestFailedError",
    "DecodeError",
]
