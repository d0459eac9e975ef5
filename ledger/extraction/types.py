# -*- coding: utf-8 -*-
"""
Extraction Types

Request and result shapes for free-text financial extraction.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ledger.models import Direction
from ledger.shared.reference_resolver import ReferenceItem, snapshot


class Classification(Enum):
    """What the free text is about."""

    TRANSACTION = "transaction"   # payment / receipt / expense
    SALE = "sale"                 # product or merchandise sale
    DISCARD = "discard"           # non-financial chatter

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Classification":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.TRANSACTION


@dataclass(frozen=True)
class ExtractionRequest:
    """
    Free text plus read-only snapshots of the caller's reference lists.

    Lists are copied into tuples at construction so later changes by the
    caller never leak into a running extraction.
    """

    text: str
    categories: tuple[ReferenceItem, ...] = ()
    accounts: tuple[ReferenceItem, ...] = ()
    contacts: tuple[ReferenceItem, ...] = ()

    @classmethod
    def build(cls, text: str, categories=None, accounts=None, contacts=None) -> "ExtractionRequest":
        return cls(
            text=text or "",
            categories=snapshot(categories),
            accounts=snapshot(accounts),
            contacts=snapshot(contacts),
        )


@dataclass
class ExtractionResult:
    """
    Structured extraction output after name binding.

    When ``classification`` is DISCARD the monetary fields are not
    authoritative and must not be persisted.
    """

    value: str
    direction: Direction
    classification: Classification
    description: str = ""
    date: Optional[str] = None

    category_id: Optional[str] = None
    account_id: Optional[str] = None
    client_id: Optional[str] = None
    category_name: str = ""
    account_name: str = ""
    client_name: str = ""
    suggested_category: str = ""

    weight: str = ""
    shipping: str = ""
    seller: str = ""
    dev_code: str = ""

    provider: str = ""
    raw: dict = field(default_factory=dict, repr=False)

    @property
    def is_discard(self) -> bool:
        return self.classification == Classification.DISCARD

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "type": self.direction.value,
            "classification": self.classification.value,
            "description": self.description,
            "date": self.date,
            "category_id": self.category_id,
            "account_id": self.account_id,
            "client_id": self.client_id,
            "category_name": self.category_name,
            "account_name": self.account_name,
            "client_name": self.client_name,
            "suggested_category": self.suggested_category,
            "weight": self.weight,
            "shipping": self.shipping,
            "seller": self.seller,
            "dev_code": self.dev_code,
            "provider": self.provider,
        }
