# -*- coding: utf-8 -*-
"""Period totals and expense breakdown using effective directions."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ledger.classification_rules import RuleLabels, apply_rules
from ledger.models import Direction, Transaction

_OTHER_CATEGORY = "Outros"


@dataclass(frozen=True)
class PeriodSummary:
    income: Decimal
    expenses: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses

    def to_dict(self) -> dict:
        return {
            "income": str(self.income),
            "expenses": str(self.expenses),
            "balance": str(self.balance),
        }


@dataclass(frozen=True)
class CategoryShare:
    name: str
    value: Decimal
    percentage: int


def summarize_period(transactions: Iterable[Transaction], labels: Optional[RuleLabels] = None) -> PeriodSummary:
    income = Decimal("0")
    expenses = Decimal("0")
    for tx in transactions:
        effective = apply_rules(tx, labels)
        if effective.direction == Direction.INCOME:
            income += effective.value
        else:
            expenses += effective.value
    return PeriodSummary(income=income, expenses=expenses)


def expense_breakdown(
    transactions: Iterable[Transaction],
    labels: Optional[RuleLabels] = None,
    *,
    limit: int = 4,
) -> list[CategoryShare]:
    """
    Largest expense categories with their share of total expenses.

    Uses effective directions, so a return counts as an expense here and a
    bounced check does not.
    """
    totals: "OrderedDict[str, Decimal]" = OrderedDict()
    total_expenses = Decimal("0")
    for tx in transactions:
        effective = apply_rules(tx, labels)
        if effective.direction != Direction.EXPENSE:
            continue
        name = tx.category_name or _OTHER_CATEGORY
        totals[name] = totals.get(name, Decimal("0")) + effective.value
        total_expenses += effective.value

    if not totals:
        return []

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[:limit]
    shares = []
    for name, value in ranked:
        percentage = (value * 100 / total_expenses).quantize(Decimal("1"), rounding=ROUND_HALF_UP) if total_expenses else Decimal("0")
        shares.append(CategoryShare(name=name, value=value, percentage=int(percentage)))
    return shares
