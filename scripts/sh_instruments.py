#!/usr/bin/env python
from __future__ import annotations

import argparse

import pandas as pd

from sharesies.client import SharesiesClient
from sharesies.models import InstrumentsRequest

COLUMNS = ["symbol", "name", "exchange", "market_price", "trading_status", "id"]


def main() -> int:
    parser = argparse.ArgumentParser(description="Search the Sharesies instrument catalogue")
    parser.add_argument("--query", help="Free-text search (optional)", default="")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--per-page", dest="per_page", type=int, default=60)
    parser.add_argument("--sort", default="relevance")
    parser.add_argument("--price-change-time", dest="price_change_time", default="1y")
    parser.add_argument("--limit", type=int, default=20, help="Rows to display")
    args = parser.parse_args()

    client = SharesiesClient.from_env()
    page = client.list_instruments(
        InstrumentsRequest(
            page=args.page,
            per_page=args.per_page,
            sort=args.sort,
            price_change_time=args.price_change_time,
            query=args.query,
        )
    )

    df = pd.DataFrame([{col: getattr(i, col) for col in COLUMNS} for i in page.instruments])
    print(f"page {page.current_page}/{page.number_of_pages}, {page.total} instruments")
    if args.limit:
        print(df.head(args.limit).to_string(index=False))
    else:
        print(df.to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
