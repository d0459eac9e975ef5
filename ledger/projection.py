# -*- coding: utf-8 -*-
"""
Cash-Flow Projection

1. Current balance: every transaction dated on or before today, any
   status, summed with its effective (rule-corrected) sign.
2. Forward projection: only confirmed transactions dated in
   (today, today + horizon]; one point per day from today to the horizon,
   carrying the running balance forward on days without movement.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from ledger.classification_rules import RuleLabels, signed_value
from ledger.config import PROJECTION_HORIZON_DAYS
from ledger.models import Transaction, TransactionStatus

logger = logging.getLogger(__name__)


class LedgerSource(Protocol):
    """Read access to persisted transactions."""

    def transactions_until(self, day: date) -> Iterable[Transaction]:
        """All transactions dated on or before ``day``."""
        ...

    def confirmed_between(self, start_exclusive: date, end_inclusive: date) -> Iterable[Transaction]:
        """Confirmed transactions dated in (start_exclusive, end_inclusive]."""
        ...


@dataclass(frozen=True)
class ProjectionPoint:
    date: date
    running_balance: Decimal

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "running_balance": str(self.running_balance)}


@dataclass
class CashFlowProjection:
    current_balance: Decimal
    points: list[ProjectionPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "current_balance": str(self.current_balance),
            "points": [point.to_dict() for point in self.points],
        }


def current_balance(transactions: Iterable[Transaction], labels: Optional[RuleLabels] = None) -> Decimal:
    total = Decimal("0")
    for tx in transactions:
        total += signed_value(tx, labels)
    return total


def build_projection(
    balance: Decimal,
    future_transactions: Iterable[Transaction],
    *,
    today: date,
    horizon_days: int,
    labels: Optional[RuleLabels] = None,
) -> list[ProjectionPoint]:
    """
    Fold future transactions into daily points.

    Returns exactly ``horizon_days + 1`` points starting at ``today``.
    Pending transactions and transactions outside the window are ignored.
    """
    if horizon_days < 0:
        raise ValueError(f"horizon_days must be non-negative: {horizon_days}")

    end = today + timedelta(days=horizon_days)
    by_day: dict[date, Decimal] = defaultdict(Decimal)
    for tx in future_transactions:
        if tx.status != TransactionStatus.CONFIRMED:
            continue
        if not (today < tx.date <= end):
            continue
        by_day[tx.date] += signed_value(tx, labels)

    points: list[ProjectionPoint] = []
    running = balance
    for offset in range(horizon_days + 1):
        day = today + timedelta(days=offset)
        running += by_day.get(day, Decimal("0"))
        points.append(ProjectionPoint(date=day, running_balance=running))
    return points


def project_cash_flow(
    source: LedgerSource,
    *,
    today: Optional[date] = None,
    horizon_days: int = PROJECTION_HORIZON_DAYS,
    labels: Optional[RuleLabels] = None,
) -> CashFlowProjection:
    """
    Compute today's balance and the daily projection from a ledger source.

    The two reads are independent and run concurrently. Source errors
    propagate to the caller.
    """
    today = today or date.today()
    end = today + timedelta(days=horizon_days)

    with ThreadPoolExecutor(max_workers=2) as executor:
        past_job = executor.submit(lambda: list(source.transactions_until(today)))
        future_job = executor.submit(lambda: list(source.confirmed_between(today, end)))
        past = past_job.result()
        future = future_job.result()

    balance = current_balance(past, labels)
    points = build_projection(balance, future, today=today, horizon_days=horizon_days, labels=labels)
    logger.info(f"Projected {len(points)} days from balance {balance} ({len(future)} future transactions)")
    return CashFlowProjection(current_balance=balance, points=points)
