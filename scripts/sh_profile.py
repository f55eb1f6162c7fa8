#!/usr/bin/env python
from __future__ import annotations

import pandas as pd

from sharesies.client import SharesiesClient


def main() -> int:
    client = SharesiesClient.from_env()
    profile = client.get_profile()

    user = profile.user
    if user is not None:
        print(f"{user.preferred_name} ({user.email})")
        if user.wallet_balances is not None:
            wallet = user.wallet_balances
            print(f"wallet: NZD {wallet.nzd}  AUD {wallet.aud}  USD {wallet.usd}")

    holdings = pd.DataFrame(
        [
            {"fund_id": h.fund_id, "shares": h.shares, "value": h.value, "return": h.return_percent}
            for h in profile.portfolio
        ]
    )
    print(holdings.to_string(index=False) if not holdings.empty else "no holdings")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
