# -*- coding: utf-8 -*-
"""Classification override rules.

Two business overrides correct the stored direction of a transaction:

- Return: income in the reserved return category counts as expense.
- Bounced instrument: expense whose description mentions the reserved
  bounced-check phrase counts as income.

The stored ``type`` is never changed; aggregations read the effective
direction computed here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from ledger.models import Direction, Transaction

_RULES_PATH = Path(__file__).resolve().parent / "data" / "classification_rules.yaml"

_DEFAULT_RETURN_CATEGORY = "Devolução"
_DEFAULT_BOUNCED_CHECK_PHRASE = "Cheque Devolvido"


class OverrideReason(Enum):
    RETURN_OVERRIDE = "return_override"
    BOUNCED_INSTRUMENT_OVERRIDE = "bounced_instrument_override"


@dataclass(frozen=True)
class RuleLabels:
    """Reserved labels the overrides compare against."""

    return_category: str = _DEFAULT_RETURN_CATEGORY
    bounced_check_phrase: str = _DEFAULT_BOUNCED_CHECK_PHRASE


@dataclass(frozen=True)
class EffectiveClassification:
    direction: Direction
    value: Decimal
    reason: Optional[OverrideReason] = None

    @property
    def signed_value(self) -> Decimal:
        return self.value if self.direction == Direction.INCOME else -self.value


@lru_cache(maxsize=1)
def _load_rules_yaml() -> dict:
    if not _RULES_PATH.exists():
        return {}
    with open(_RULES_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@lru_cache(maxsize=1)
def default_labels() -> RuleLabels:
    """Labels from classification_rules.yaml, with built-in defaults."""
    data = _load_rules_yaml()
    labels = data.get("labels") if isinstance(data, dict) else None
    labels = labels if isinstance(labels, dict) else {}
    return RuleLabels(
        return_category=labels.get("return_category") or _DEFAULT_RETURN_CATEGORY,
        bounced_check_phrase=labels.get("bounced_check_phrase") or _DEFAULT_BOUNCED_CHECK_PHRASE,
    )


def _casefold(value: Optional[str]) -> str:
    return (value or "").strip().casefold()


def is_return(category_name: Optional[str], labels: RuleLabels) -> bool:
    label = _casefold(labels.return_category)
    return bool(label) and _casefold(category_name) == label


def is_bounced_instrument(description: Optional[str], labels: RuleLabels) -> bool:
    phrase = _casefold(labels.bounced_check_phrase)
    return bool(phrase) and phrase in _casefold(description)


def classify(
    tx_type: Direction,
    value: Decimal,
    *,
    category_name: Optional[str] = None,
    description: Optional[str] = None,
    labels: Optional[RuleLabels] = None,
) -> EffectiveClassification:
    """
    Compute the effective direction for a stored type.

    Each rule only fires from its own starting direction, so at most one
    applies. Applying the rules to the same inputs always yields the same
    result.
    """
    labels = labels or default_labels()
    if isinstance(tx_type, str):
        tx_type = Direction.from_string(tx_type)
    if not isinstance(value, Decimal):
        value = Decimal(str(value))

    if tx_type == Direction.INCOME and is_return(category_name, labels):
        return EffectiveClassification(Direction.EXPENSE, value, OverrideReason.RETURN_OVERRIDE)
    if tx_type == Direction.EXPENSE and is_bounced_instrument(description, labels):
        return EffectiveClassification(Direction.INCOME, value, OverrideReason.BOUNCED_INSTRUMENT_OVERRIDE)
    return EffectiveClassification(tx_type, value)


def apply_rules(tx: Transaction, labels: Optional[RuleLabels] = None) -> EffectiveClassification:
    return classify(
        tx.type,
        tx.value,
        category_name=tx.category_name,
        description=tx.description,
        labels=labels,
    )


def signed_value(tx: Transaction, labels: Optional[RuleLabels] = None) -> Decimal:
    """Effective value with sign: income adds, expense subtracts."""
    return apply_rules(tx, labels).signed_value
