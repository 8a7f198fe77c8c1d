#!/usr/bin/env python3
"""
Reset a user's password in the Finance Tracker SQLite database.

This script does not read or reveal any existing passwords.  It sets a
new password hash for the given email, in the same "salthex$hashhex"
format the API produces.

Usage:
    python reset_password.py --db ./finance_tracker_api/finance_tracker.db --email user@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from finance_tracker_api.app.core.security import hash_password


def main():
    ap = argparse.ArgumentParser(description="Reset Finance Tracker user password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./finance_tracker_api/finance_tracker.db)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--enable", action="store_true", help="Also re-enable a disabled account")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    email = args.email.lower()
    hashed = hash_password(new_password)

    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        if not cur.fetchone():
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            sys.exit(2)

        if args.enable:
            cur.execute(
                "UPDATE users SET password = ?, disabled = 0, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (hashed, email),
            )
        else:
            cur.execute(
                "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (hashed, email),
            )
        conn.commit()
        print(f"[+] Password updated for user: {email}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
