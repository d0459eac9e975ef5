# -*- coding: utf-8 -*-
"""In-memory ledger implementing both the read source and the write sink."""

from __future__ import annotations

import threading
from datetime import date
from typing import Iterable, Optional

from ledger.models import Transaction, TransactionStatus


class InMemoryLedger:
    """Transactions kept in a list; reads return copies of the list."""

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None):
        self._lock = threading.Lock()
        self._transactions: list[Transaction] = list(transactions or [])

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)

    def all(self) -> list[Transaction]:
        with self._lock:
            return list(self._transactions)

    def transactions_until(self, day: date) -> list[Transaction]:
        return [tx for tx in self.all() if tx.date <= day]

    def confirmed_between(self, start_exclusive: date, end_inclusive: date) -> list[Transaction]:
        return [
            tx
            for tx in self.all()
            if tx.status == TransactionStatus.CONFIRMED and start_exclusive < tx.date <= end_inclusive
        ]

    def save_all(self, transactions: Iterable[Transaction]) -> None:
        batch = list(transactions)
        with self._lock:
            known = {tx.id for tx in self._transactions}
            duplicates = [tx.id for tx in batch if tx.id in known]
            if duplicates:
                raise ValueError(f"Transaction ids already stored: {', '.join(duplicates)}")
            self._transactions.extend(batch)

    @classmethod
    def from_dicts(cls, rows: Iterable[dict]) -> "InMemoryLedger":
        return cls(Transaction.from_dict(row) for row in rows)
