# -*- coding: utf-8 -*-
"""
Ledger entity types shared by the rules engine, the projector and the
import workflow.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional


def to_decimal(raw) -> Decimal:
    """Strict decimal conversion for stored values; raises ValueError."""
    if isinstance(raw, Decimal):
        value = raw
    else:
        try:
            value = Decimal(str(raw))
        except InvalidOperation as e:
            raise ValueError(f"Invalid decimal value: {raw!r}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid decimal value: {raw!r}")
    return value


class Direction(Enum):
    """Money direction of a ledger entry."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_string(cls, value: Optional[str], default: Optional["Direction"] = None) -> "Direction":
        """Parse a direction label; unknown labels fall back to ``default``."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            if default is not None:
                return default
            raise ValueError(f"Unknown direction: {value}")

    @classmethod
    def from_amount(cls, amount: Decimal) -> "Direction":
        """Non-negative amounts are income."""
        return cls.INCOME if amount >= 0 else cls.EXPENSE


class TransactionStatus(Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"


@dataclass
class Transaction:
    """
    A persisted ledger entry.

    ``value`` is always non-negative; direction is carried by ``type`` only.
    ``category_name`` is the display name of the bound category, which the
    classification rules need.
    """

    id: str
    date: date
    value: Decimal
    type: Direction
    status: TransactionStatus = TransactionStatus.CONFIRMED
    category_ref: Optional[str] = None
    account_ref: Optional[str] = None
    description: str = ""
    category_name: Optional[str] = None
    is_ai_extracted: bool = False

    def __post_init__(self) -> None:
        self.value = to_decimal(self.value)
        if self.value < 0:
            raise ValueError(f"Transaction value must be non-negative: {self.value}")
        if isinstance(self.type, str):
            self.type = Direction.from_string(self.type)
        if isinstance(self.status, str):
            self.status = TransactionStatus(self.status)
        if isinstance(self.date, str):
            self.date = date.fromisoformat(self.date)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "value": str(self.value),
            "type": self.type.value,
            "status": self.status.value,
            "category_ref": self.category_ref,
            "account_ref": self.account_ref,
            "description": self.description,
            "category_name": self.category_name,
            "is_ai_extracted": self.is_ai_extracted,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        return cls(
            id=str(data["id"]),
            date=data["date"],
            value=data["value"],
            type=data["type"],
            status=data.get("status", TransactionStatus.CONFIRMED.value),
            category_ref=data.get("category_ref"),
            account_ref=data.get("account_ref"),
            description=data.get("description") or "",
            category_name=data.get("category_name"),
            is_ai_extracted=bool(data.get("is_ai_extracted", False)),
        )
