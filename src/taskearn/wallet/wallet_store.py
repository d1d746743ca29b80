# src/taskearn/wallet/wallet_store.py

from __future__ import annotations

import contextlib
import json
import logging
import math
import sqlite3
import time
from pathlib import Path
from typing import Any

from ..core.errors import InsufficientBalanceError
from .wallet_models import Transaction, TransactionStatus, TransactionType, UserBalance

logger = logging.getLogger(__name__)


class WalletStore:
    """
    SQLite ledger of user balances and transactions.

    Every balance change and its transaction row are written in a single
    SQLite transaction (BEGIN IMMEDIATE), so concurrent writers serialize.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "wallet.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("WalletStore ready db=%s", self._db_path)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS user_balances (
                    user_id TEXT PRIMARY KEY,
                    usdc_balance REAL NOT NULL DEFAULT 0,
                    pending_balance REAL NOT NULL DEFAULT 0,
                    total_earned REAL NOT NULL DEFAULT 0,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS transactions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    type TEXT NOT NULL,
                    amount REAL NOT NULL,
                    status TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    created_at REAL NOT NULL,
                    metadata TEXT NOT NULL DEFAULT '{}'
                )
                """
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_transactions_user ON transactions(user_id, created_at)"
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _check_amount(amount: float) -> float:
        value = float(amount)
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"amount must be a positive finite number, got {amount!r}")
        return value

    @staticmethod
    def _ensure_balance_row(conn: sqlite3.Connection, user_id: str, now: float) -> None:
        conn.execute(
            "INSERT OR IGNORE INTO user_balances(user_id, updated_at) VALUES (?, ?)",
            (user_id, now),
        )

    @staticmethod
    def _row_to_balance(row: sqlite3.Row) -> UserBalance:
        return UserBalance(
            user_id=str(row["user_id"]),
            usdc_balance=float(row["usdc_balance"] or 0.0),
            pending_balance=float(row["pending_balance"] or 0.0),
            total_earned=float(row["total_earned"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    @staticmethod
    def _row_to_transaction(row: sqlite3.Row) -> Transaction:
        try:
            meta = json.loads(row["metadata"] or "{}")
        except json.JSONDecodeError:
            meta = {}
        return Transaction(
            id=int(row["id"]),
            user_id=str(row["user_id"]),
            type=TransactionType.from_db(row["type"]),
            amount=float(row["amount"]),
            status=TransactionStatus.from_db(row["status"]),
            description=str(row["description"] or ""),
            created_at=float(row["created_at"]),
            metadata=meta if isinstance(meta, dict) else {},
        )

    def _insert_transaction(
        self,
        conn: sqlite3.Connection,
        *,
        user_id: str,
        type_: TransactionType,
        amount: float,
        status: TransactionStatus,
        description: str,
        now: float,
        metadata: dict[str, Any] | None = None,
    ) -> int:
        cur = conn.execute(
            """
            INSERT INTO transactions(user_id, type, amount, status, description, created_at, metadata)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                type_.value,
                amount,
                status.value,
                description,
                now,
                json.dumps(metadata or {}, ensure_ascii=False),
            ),
        )
        if cur.lastrowid is None:
            raise RuntimeError("SQLite did not return lastrowid for transactions insert")
        return int(cur.lastrowid)

    # ---- public API ----

    def get_balance(self, user_id: str) -> UserBalance:
        """Current balance; a zero balance row is created on first access."""
        conn = self._get_conn()
        try:
            self._ensure_balance_row(conn, user_id, time.time())
            conn.commit()
            row = conn.execute("SELECT * FROM user_balances WHERE user_id = ?", (user_id,)).fetchone()
            return self._row_to_balance(row)
        finally:
            conn.close()

    def add_task_reward(self, user_id: str, amount: float, description: str) -> UserBalance:
        value = self._check_amount(amount)
        now = time.time()

        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            self._ensure_balance_row(conn, user_id, now)
            conn.execute(
                """
                UPDATE user_balances
                SET usdc_balance = usdc_balance + ?,
                    total_earned = total_earned + ?,
                    updated_at = ?
                WHERE user_id = ?
                """,
                (value, value, now, user_id),
            )
            tx_id = self._insert_transaction(
                conn,
                user_id=user_id,
                type_=TransactionType.TASK_REWARD,
                amount=value,
                status=TransactionStatus.COMPLETED,
                description=description,
                now=now,
            )
            conn.commit()
            row = conn.execute("SELECT * FROM user_balances WHERE user_id = ?", (user_id,)).fetchone()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        logger.info("Reward credited user=%s amount=%.2f tx=%s", user_id, value, tx_id)
        return self._row_to_balance(row)

    def request_withdrawal(self, user_id: str, amount: float, method: str) -> Transaction:
        """
        Move amount from the available balance to pending and record a PENDING
        withdrawal. Raises InsufficientBalanceError when the balance is too small.
        """
        value = self._check_amount(amount)
        now = time.time()

        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            self._ensure_balance_row(conn, user_id, now)
            row = conn.execute(
                "SELECT usdc_balance FROM user_balances WHERE user_id = ?", (user_id,)
            ).fetchone()
            available = float(row["usdc_balance"] or 0.0)
            if available < value:
                raise InsufficientBalanceError(user_id, value, available)

            conn.execute(
                """
                UPDATE user_balances
                SET usdc_balance = usdc_balance - ?,
                    pending_balance = pending_balance + ?,
                    updated_at = ?
                WHERE user_id = ?
                """,
                (value, value, now, user_id),
            )
            tx_id = self._insert_transaction(
                conn,
                user_id=user_id,
                type_=TransactionType.WITHDRAWAL,
                amount=value,
                status=TransactionStatus.PENDING,
                description=f"Withdrawal via {method}",
                now=now,
                metadata={"method": method},
            )
            conn.commit()
            tx_row = conn.execute("SELECT * FROM transactions WHERE id = ?", (tx_id,)).fetchone()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        logger.info("Withdrawal requested user=%s amount=%.2f method=%s tx=%s", user_id, value, method, tx_id)
        return self._row_to_transaction(tx_row)

    def list_transactions(self, user_id: str, limit: int = 10, offset: int = 0) -> list[Transaction]:
        """Newest first."""
        conn = self._get_conn()
        try:
            cur = conn.execute(
                """
                SELECT *
                FROM transactions
                WHERE user_id = ?
                ORDER BY created_at DESC, id DESC
                    LIMIT ? OFFSET ?
                """,
                (user_id, int(limit), int(offset)),
            )
            return [self._row_to_transaction(r) for r in cur.fetchall()]
        finally:
            conn.close()
