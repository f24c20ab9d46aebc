"""
SQLite credit ledger.
One row per identity-provider user; credits gate design requests.
"""

from __future__ import annotations

import aiosqlite
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CREDITS = 3


class CreditLedger:
    """
    Per-user credit balances backed by a SQLite file.

    Each operation opens its own connection. Consumption is a single
    conditional UPDATE, so concurrent requests cannot overdraw a balance.
    """

    def __init__(self, db_path: str | Path, default_credits: int = DEFAULT_CREDITS):
        self.db_path = str(db_path)
        self.default_credits = default_credits

    async def init_db(self) -> None:
        """Initialize database tables if they don't exist."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("""
                CREATE TABLE IF NOT EXISTS user_credits (
                    clerk_id TEXT PRIMARY KEY,
                    credits INTEGER NOT NULL DEFAULT 3 CHECK (credits >= 0),
                    created_at TIMESTAMP,
                    updated_at TIMESTAMP
                )
            """)
            await db.commit()
            logger.info(f"Credit ledger initialized at {self.db_path}")

    async def ping(self) -> bool:
        """True if the ledger table can be queried."""
        try:
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute("SELECT 1 FROM user_credits LIMIT 1")
            return True
        except aiosqlite.Error as e:
            logger.error(f"Credit ledger unreachable at {self.db_path}: {e}")
            return False

    async def get_credits(self, user_id: str) -> Optional[int]:
        """Get the balance for a user. Returns None if the user has no row."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT credits FROM user_credits WHERE clerk_id = ?",
                (user_id,)
            )
            row = await cursor.fetchone()
            return row[0] if row else None

    async def create_account(self, user_id: str, credits: Optional[int] = None) -> bool:
        """
        Create a ledger row with the starting balance.
        Returns False if the user already had one (row left untouched).
        """
        if credits is None:
            credits = self.default_credits
        now = datetime.now(timezone.utc).isoformat()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("""
                INSERT INTO user_credits (clerk_id, credits, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(clerk_id) DO NOTHING
            """, (user_id, credits, now, now))
            await db.commit()
            created = cursor.rowcount == 1

        if created:
            logger.info(f"Created credit account for {user_id[:8]}... with {credits} credits")
        else:
            logger.info(f"Credit account for {user_id[:8]}... already exists")
        return created

    async def try_consume(self, user_id: str) -> Optional[int]:
        """
        Spend one credit if the balance is positive.
        Returns the new balance, or None if there was nothing to spend.
        """
        now = datetime.now(timezone.utc).isoformat()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("""
                UPDATE user_credits
                SET credits = credits - 1, updated_at = ?
                WHERE clerk_id = ? AND credits > 0
            """, (now, user_id))
            if cursor.rowcount != 1:
                await db.rollback()
                logger.info(f"Credit consume rejected for {user_id[:8]}...")
                return None

            # Same transaction: the write lock is still held
            cursor = await db.execute(
                "SELECT credits FROM user_credits WHERE clerk_id = ?",
                (user_id,)
            )
            row = await cursor.fetchone()
            await db.commit()

        new_balance = row[0]
        logger.info(f"User {user_id[:8]}... credits decremented to {new_balance}")
        return new_balance

    async def list_accounts(self) -> list[dict]:
        """List every ledger row, most recently updated first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("""
                SELECT clerk_id, credits, created_at, updated_at
                FROM user_credits
                ORDER BY updated_at DESC
            """)
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]
