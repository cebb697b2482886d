#!/usr/bin/env python3
"""
Reset a vendor's password through the Market Admin API.

This script DOES NOT read or reveal any existing passwords.  It asks
the service to set a new password on the login account of the vendor
with the given email.  The caller authenticates with the access token
of a management vendor.

Usage:
    python reset_vendor_password.py --email vendor@ex.com --password "NewStrongPass!234"

``--url`` and ``--token`` default to the MARKET_ADMIN_URL and
MARKET_ADMIN_TOKEN environment variables.  If --password is omitted,
you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from market_admin_client import MarketAdminClient

EXIT_OK = 0
EXIT_BAD_INPUT = 1
EXIT_NOT_FOUND = 2
EXIT_FAILED = 3


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Reset a vendor's password via the Market Admin API.")
    ap.add_argument("--email", required=True, help="Email of the vendor to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--url", default=os.getenv("MARKET_ADMIN_URL"), help="Base URL of the API (env MARKET_ADMIN_URL)")
    ap.add_argument("--token", default=os.getenv("MARKET_ADMIN_TOKEN"), help="Management access token (env MARKET_ADMIN_TOKEN)")
    return ap


def main(argv=None, client=None) -> int:
    args = build_parser().parse_args(argv)

    if client is None:
        if not args.url or not args.token:
            print("[!] Both --url and --token (or MARKET_ADMIN_URL / MARKET_ADMIN_TOKEN) are required.", file=sys.stderr)
            return EXIT_BAD_INPUT
        client = MarketAdminClient(base_url=args.url, access_token=args.token)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return EXIT_BAD_INPUT

    _, error = client.reset_vendor_password(args.email, new_password)
    if error:
        if error.get("status_code") == 404:
            print(f"[!] No vendor found with email: {args.email}", file=sys.stderr)
            return EXIT_NOT_FOUND
        print(f"[!] Password reset failed: {error.get('message')}", file=sys.stderr)
        return EXIT_FAILED

    print(f"[+] Password updated for vendor: {args.email}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
