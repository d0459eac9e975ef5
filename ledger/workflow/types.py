# -*- coding: utf-8 -*-
"""
Workflow Types

Candidates under review, the persistence seam they are committed through,
and the draft produced for sale messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from ledger.extraction.types import Classification, ExtractionResult
from ledger.models import Direction, Transaction, to_decimal
from ledger.parser.types import RawStatementRecord


class TransactionSink(Protocol):
    """Write access to the ledger. One call per committed batch."""

    def save_all(self, transactions: Iterable[Transaction]) -> None:
        ...


@dataclass
class TransactionCandidate:
    """
    One statement line awaiting human confirmation.

    ``value`` is the absolute amount; ``direction`` carries the sign.
    """

    external_id: str
    date: date
    value: Optional[Decimal]
    direction: Direction
    memo: str = ""
    description: str = ""
    category_id: str = ""
    account_id: str = ""
    suggested_category: str = ""
    classification: Optional[Classification] = None
    is_ai_refined: bool = False
    discarded: bool = False

    @classmethod
    def from_record(cls, record: RawStatementRecord, account_id: str = "") -> "TransactionCandidate":
        return cls(
            external_id=record.external_id,
            date=record.posted_date,
            value=abs(record.amount),
            direction=Direction.from_amount(record.amount),
            memo=record.memo,
            description=record.memo,
            account_id=account_id,
        )

    @property
    def committable(self) -> bool:
        return not self.discarded and self.classification != Classification.DISCARD

    def to_dict(self) -> dict:
        return {
            "external_id": self.external_id,
            "date": self.date.isoformat(),
            "value": None if self.value is None else str(self.value),
            "type": self.direction.value,
            "memo": self.memo,
            "description": self.description,
            "category_id": self.category_id,
            "account_id": self.account_id,
            "suggested_category": self.suggested_category,
            "classification": self.classification.value if self.classification else None,
            "is_ai_refined": self.is_ai_refined,
            "discarded": self.discarded,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TransactionCandidate":
        value = data.get("value")
        classification = data.get("classification")
        return cls(
            external_id=str(data["external_id"]),
            date=date.fromisoformat(data["date"]),
            value=None if value in (None, "") else to_decimal(value),
            direction=Direction.from_string(data.get("type"), default=Direction.EXPENSE),
            memo=data.get("memo") or "",
            description=data.get("description") or "",
            category_id=data.get("category_id") or "",
            account_id=data.get("account_id") or "",
            suggested_category=data.get("suggested_category") or "",
            classification=Classification.from_string(classification) if classification else None,
            is_ai_refined=bool(data.get("is_ai_refined", False)),
            discarded=bool(data.get("discarded", False)),
        )


@dataclass
class SaleDraft:
    """A sale read from a message, left for the sales screen to complete."""

    value: Optional[Decimal]
    description: str = ""
    date: Optional[date] = None
    client_id: Optional[str] = None
    client_name: str = ""
    weight: str = ""
    shipping: str = ""
    seller: str = ""
    dev_code: str = ""
    raw: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_result(cls, result: ExtractionResult, value: Optional[Decimal], day: Optional[date]) -> "SaleDraft":
        return cls(
            value=value,
            description=result.description,
            date=day,
            client_id=result.client_id,
            client_name=result.client_name,
            weight=result.weight,
            shipping=result.shipping,
            seller=result.seller,
            dev_code=result.dev_code,
            raw=result.to_dict(),
        )

    def to_dict(self) -> dict:
        return {
            "value": None if self.value is None else str(self.value),
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "weight": self.weight,
            "shipping": self.shipping,
            "seller": self.seller,
            "dev_code": self.dev_code,
        }
