#!/usr/bin/env python3
"""
Check credit balances in the SQLite ledger.

Usage:
    python scripts/check_credits.py
    python scripts/check_credits.py --user user_2abc...
"""

import asyncio
import os
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from dotenv import load_dotenv

# Load .env from backend
load_dotenv(Path(__file__).parent.parent / "backend" / ".env")


async def check_credits(user_id: str | None = None):
    """Print one user's balance, or every account."""
    from infraai.database import CreditLedger

    db_path = os.getenv("CREDITS_DB_PATH", "user_credits.db")
    if not Path(db_path).exists():
        print(f"Error: ledger database {db_path} does not exist")
        return

    ledger = CreditLedger(db_path)

    if user_id:
        credits = await ledger.get_credits(user_id)
        if credits is None:
            print(f"No credit account for {user_id}")
        else:
            print(f"{user_id}: {credits} credits")
        return

    accounts = await ledger.list_accounts()
    if not accounts:
        print("No credit accounts found.")
        return

    print(f"\n=== Credit accounts ({db_path}) ===\n")
    print(f"{'User':<36} {'Credits':<8} {'Created':<27} {'Updated':<27}")
    print("-" * 100)

    exhausted = 0
    for account in accounts:
        if account["credits"] == 0:
            exhausted += 1
        print(
            f"{account['clerk_id']:<36} {account['credits']:<8} "
            f"{str(account['created_at']):<27} {str(account['updated_at']):<27}"
        )

    print("-" * 100)
    print(f"Total: {len(accounts)} accounts, {exhausted} with no credits left")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Check credit balances")
    parser.add_argument("--user", help="Clerk user id to look up")
    args = parser.parse_args()

    asyncio.run(check_credits(args.user))
