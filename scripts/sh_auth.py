#!/usr/bin/env python
from __future__ import annotations

import argparse
import json

from sharesies.auth import Credentials, load_credentials
from sharesies.client import SharesiesClient
from sharesies.config import ClientConfig
from sharesies.utils.env import load_env_file_if_present


def main() -> int:
    parser = argparse.ArgumentParser(description="Log in to Sharesies and show the token expiry")
    parser.add_argument(
        "--username",
        default=None,
        help="Login email (defaults to $SHARESIES_USERNAME or .env)",
    )
    args = parser.parse_args()

    load_env_file_if_present()  # populate env if .env exists
    creds = load_credentials(dotenv=False)
    if args.username:
        creds = Credentials(username=args.username, password=creds.password)

    client = SharesiesClient(config=ClientConfig.from_env(dotenv=False))
    profile = client.authenticate(creds)
    session = client.session
    print(
        json.dumps(
            {
                "ok": profile.authenticated,
                "token_prefix": session.token[:16] + "...",
                "expires_at": session.expires_at.isoformat() if session.expires_at else None,
                "acting_as_id": session.acting_as_id,
                "user": creds.username,
            }
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
