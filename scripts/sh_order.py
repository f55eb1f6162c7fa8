#!/usr/bin/env python
"""Price a buy or sell order, and optionally submit it.

Without --execute only the quote is printed.
"""

from __future__ import annotations

import argparse
import json

from sharesies.client import SharesiesClient


def main() -> int:
    parser = argparse.ArgumentParser(description="Price (and optionally place) a Sharesies order")
    parser.add_argument("side", choices=["buy", "sell"])
    parser.add_argument("fund_id", help="Instrument id")
    parser.add_argument("amount", help="Dollars to spend (buy) or shares to sell (sell)")
    parser.add_argument("--execute", action="store_true", help="Submit the priced order")
    args = parser.parse_args()

    client = SharesiesClient.from_env()
    if args.side == "buy":
        quote = client.price_buy(args.fund_id, args.amount)
    else:
        quote = client.price_sell(args.fund_id, args.amount)
    print(json.dumps(quote.raw, indent=2))

    if not args.execute:
        return 0

    if args.side == "buy":
        profile = client.submit_buy(quote)
    else:
        profile = client.submit_sell(quote)
    print(json.dumps({"ok": True, "holdings": len(profile.portfolio)}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
