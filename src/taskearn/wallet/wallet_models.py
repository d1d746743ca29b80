# src/taskearn/wallet/wallet_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class TransactionType(StrEnum):
    TASK_REWARD = "TASK_REWARD"
    WITHDRAWAL = "WITHDRAWAL"

    @classmethod
    def from_db(cls, raw: str | None) -> TransactionType:
        if not raw:
            return cls.TASK_REWARD
        try:
            return cls(raw)
        except ValueError:
            return cls.TASK_REWARD


class TransactionStatus(StrEnum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @classmethod
    def from_db(cls, raw: str | None) -> TransactionStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


@dataclass(slots=True)
class UserBalance:
    user_id: str
    usdc_balance: float
    pending_balance: float
    total_earned: float
    updated_at: float


@dataclass(slots=True)
class Transaction:
    id: int
    user_id: str
    type: TransactionType
    amount: float
    status: TransactionStatus
    description: str
    created_at: float
    metadata: dict[str, Any] = field(default_factory=dict)
