#!/usr/bin/env python3
"""
Import a bank statement CSV into a Finance Tracker account.

The columns of the file are mapped to transaction fields with ``--map``,
a comma-separated list of ``<column index>=<field>`` pairs where field is
one of ``amount``, ``date``, ``payee`` or ``skip``.  Dates in the file
must look like ``2024-03-01 09:30:00``; amounts are display units and
are sent to the API as milliunits.

Usage:
    python import_transactions.py --file statement.csv --account Checking \\
        --map 0=date,1=payee,2=amount --email user@example.com

    # only show the header row and the first rows of the file
    python import_transactions.py --file statement.csv --preview

The API URL and token can also be given via FINANCE_API_URL and
FINANCE_API_TOKEN.  Without a token the script logs in with --email and
prompts for the password.
"""

import argparse
import getpass
import logging
import os
import sys
from typing import Dict, List, Optional

from finance_tracker_client import FinanceTrackerAPI
from finance_tracker_api.app.services.import_service import (
    CsvImportError,
    build_transactions,
    parse_csv,
)


logger = logging.getLogger("import_transactions")

PREVIEW_ROWS = 5


def parse_mapping(value: str) -> Dict[int, Optional[str]]:
    """Parse ``"0=date,1=payee,2=amount"`` into ``{0: "date", 1: "payee", 2: "amount"}``."""
    columns: Dict[int, Optional[str]] = {}
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        index, sep, field = part.partition("=")
        if not sep or not index.strip().isdigit():
            raise CsvImportError(f"Invalid column mapping '{part}', expected <index>=<field>")
        columns[int(index)] = field.strip().lower() or None
    return columns


def build_payloads(csv_text: str, columns: Dict[int, Optional[str]], account_id: str) -> List[dict]:
    """Map the CSV rows and attach them to ``account_id`` for bulk creation."""
    return [item.model_dump(mode="json") for item in build_transactions(csv_text, columns, account_id)]


def print_preview(csv_text: str) -> None:
    headers, body = parse_csv(csv_text)
    for index, header in enumerate(headers):
        print(f"{index}: {header}")
    for row in body[:PREVIEW_ROWS]:
        print(" | ".join(row))
    if len(body) > PREVIEW_ROWS:
        print(f"... {len(body) - PREVIEW_ROWS} more row(s)")


def main():
    ap = argparse.ArgumentParser(description="Import a CSV statement into Finance Tracker.")
    ap.add_argument("--file", required=True, help="Path to the CSV file")
    ap.add_argument("--account", help="Target account id or name")
    ap.add_argument("--map", dest="mapping", help="Column mapping, e.g. 0=date,1=payee,2=amount")
    ap.add_argument("--preview", action="store_true", help="Print the columns and first rows, then exit")
    ap.add_argument("--dry-run", action="store_true", help="Validate and print the transactions without sending them")
    ap.add_argument("--base-url", default=os.getenv("FINANCE_API_URL", "http://localhost:8000/api/v1"))
    ap.add_argument("--token", default=os.getenv("FINANCE_API_TOKEN"))
    ap.add_argument("--email", help="Log in with this email when no token is given")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if not os.path.exists(args.file):
        print(f"[!] File not found: {args.file}", file=sys.stderr)
        sys.exit(1)
    with open(args.file, encoding="utf-8-sig", newline="") as fh:
        csv_text = fh.read()

    try:
        if args.preview:
            print_preview(csv_text)
            return
        if not args.mapping or not args.account:
            print("[!] --account and --map are required unless --preview is given.", file=sys.stderr)
            sys.exit(1)
        columns = parse_mapping(args.mapping)
        if args.dry_run:
            for payload in build_payloads(csv_text, columns, args.account):
                print(f"{payload['date']}  {payload['amount'] / 1000:>12.2f}  {payload['payee']}")
            return
        # Validate locally before contacting the server.
        build_payloads(csv_text, columns, "")
    except CsvImportError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        sys.exit(1)

    api = FinanceTrackerAPI(base_url=args.base_url, token=args.token)
    if not api.token:
        if not args.email:
            print("[!] Provide --token, FINANCE_API_TOKEN or --email.", file=sys.stderr)
            sys.exit(1)
        _, error = api.login(args.email, getpass.getpass("Password: "))
        if error:
            print(f"[!] Login failed: {error['message']}", file=sys.stderr)
            sys.exit(2)

    account, error = api.find_account(args.account)
    if error:
        print(f"[!] {error['message']}", file=sys.stderr)
        sys.exit(2)

    payloads = build_payloads(csv_text, columns, account["id"])
    if not payloads:
        print("[+] Nothing to import.")
        return
    created, error = api.bulk_create_transactions(payloads)
    if error:
        print(f"[!] Import failed: {error['message']}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] Imported {len(created)} transaction(s) into {account['name']}")


if __name__ == "__main__":
    main()
