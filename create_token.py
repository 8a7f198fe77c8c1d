#!/usr/bin/env python3
"""
Print a long-lived access token for an existing user.

Usage:
    python create_token.py --email user@example.com --days 365

The token is signed with the SECRET_KEY of the current environment, so
run it with the same configuration as the server.
"""

import argparse

from finance_tracker_api.app.core.security import create_access_token


def main():
    ap = argparse.ArgumentParser(description="Create a Finance Tracker API access token.")
    ap.add_argument("--email", required=True, help="Email of the user the token is issued for")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days (default: 365)")
    args = ap.parse_args()

    token = create_access_token({"sub": args.email.lower()}, expires_delta=args.days * 24 * 60 * 60)
    print(token)


if __name__ == "__main__":
    main()
