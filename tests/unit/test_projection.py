# -*- coding: utf-8 -*-
"""
Test cash-flow projection
"""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import Mock

import pytest

from ledger.models import Direction, Transaction, TransactionStatus
from ledger.projection import build_projection, current_balance, project_cash_flow
from ledger.services.memory_ledger import InMemoryLedger
from ledger.services.supersede import LatestOnly


def _tx(tx_id, day, value, tx_type=Direction.INCOME, status=TransactionStatus.CONFIRMED, **kwargs):
    return Transaction(id=tx_id, date=day, value=Decimal(value), type=tx_type, status=status, **kwargs)


class TestCurrentBalance:
    """Balance up to today"""

    def test_sums_effective_signs(self, labels, today):
        txs = [
            _tx("1", today, "1000"),
            _tx("2", today, "300", Direction.EXPENSE),
            _tx("3", today, "50", category_name="Devolução"),
            _tx("4", today, "20", Direction.EXPENSE, description="Cheque Devolvido #9"),
        ]
        assert current_balance(txs, labels) == Decimal("1000") - 300 - 50 + 20

    def test_includes_pending(self, labels, today):
        txs = [_tx("1", today, "10", status=TransactionStatus.PENDING)]
        assert current_balance(txs, labels) == Decimal("10")


class TestBuildProjection:
    """Daily points over the horizon"""

    def test_single_future_income(self, labels, today):
        future = [_tx("f1", today + timedelta(days=5), "100")]
        points = build_projection(Decimal("1000"), future, today=today, horizon_days=10, labels=labels)

        assert len(points) == 11
        assert points[0].date == today
        assert [p.running_balance for p in points[:5]] == [Decimal("1000")] * 5
        assert all(p.running_balance == Decimal("1100") for p in points[5:])

    def test_no_gaps_in_dates(self, labels, today):
        points = build_projection(Decimal("0"), [], today=today, horizon_days=30, labels=labels)

        assert [p.date for p in points] == [today + timedelta(days=i) for i in range(31)]

    def test_empty_ledger_is_flat_zero(self, labels, today):
        points = build_projection(Decimal("0"), [], today=today, horizon_days=3, labels=labels)
        assert all(p.running_balance == Decimal("0") for p in points)

    def test_pending_and_out_of_window_ignored(self, labels, today):
        future = [
            _tx("p", today + timedelta(days=1), "999", status=TransactionStatus.PENDING),
            _tx("today", today, "999"),
            _tx("late", today + timedelta(days=11), "999"),
        ]
        points = build_projection(Decimal("5"), future, today=today, horizon_days=10, labels=labels)

        assert points[-1].running_balance == Decimal("5")

    def test_overrides_apply_to_future_movements(self, labels, today):
        future = [
            _tx("ret", today + timedelta(days=1), "40", category_name="Devolução"),
            _tx("chq", today + timedelta(days=2), "15", Direction.EXPENSE, description="Cheque Devolvido"),
        ]
        points = build_projection(Decimal("100"), future, today=today, horizon_days=2, labels=labels)

        assert [p.running_balance for p in points] == [Decimal("100"), Decimal("60"), Decimal("75")]

    def test_zero_horizon(self, labels, today):
        assert len(build_projection(Decimal("1"), [], today=today, horizon_days=0, labels=labels)) == 1

    def test_negative_horizon_rejected(self, labels, today):
        with pytest.raises(ValueError):
            build_projection(Decimal("0"), [], today=today, horizon_days=-1, labels=labels)


class TestProjectCashFlow:
    """End to end over a ledger source"""

    def test_in_memory_ledger(self, labels, today):
        ledger = InMemoryLedger([
            _tx("past", today - timedelta(days=3), "500"),
            _tx("now", today, "100", Direction.EXPENSE),
            _tx("soon", today + timedelta(days=2), "50"),
            _tx("pending", today + timedelta(days=2), "70", status=TransactionStatus.PENDING),
        ])

        projection = project_cash_flow(ledger, today=today, horizon_days=5, labels=labels)

        assert projection.current_balance == Decimal("400")
        assert len(projection.points) == 6
        assert projection.points[1].running_balance == Decimal("400")
        assert projection.points[2].running_balance == Decimal("450")
        assert projection.points[-1].running_balance == Decimal("450")

    def test_queries_source_with_window(self, labels, today):
        source = Mock()
        source.transactions_until.return_value = []
        source.confirmed_between.return_value = []

        project_cash_flow(source, today=today, horizon_days=30, labels=labels)

        source.transactions_until.assert_called_once_with(today)
        source.confirmed_between.assert_called_once_with(today, today + timedelta(days=30))

    def test_source_errors_propagate(self, labels, today):
        source = Mock()
        source.transactions_until.side_effect = ConnectionError("database down")
        source.confirmed_between.return_value = []

        with pytest.raises(ConnectionError):
            project_cash_flow(source, today=today, labels=labels)

    def test_to_dict(self, labels, today):
        projection = project_cash_flow(InMemoryLedger(), today=today, horizon_days=1, labels=labels)

        assert projection.to_dict() == {
            "current_balance": "0",
            "points": [
                {"date": "2024-03-01", "running_balance": "0"},
                {"date": "2024-03-02", "running_balance": "0"},
            ],
        }


class TestProjectionSupersede:
    def test_retriggered_projection_drops_stale_result(self, labels, today):
        guard = LatestOnly("projection")
        ledger = InMemoryLedger([_tx("1", today, "10")])

        def stale(ticket):
            result = project_cash_flow(ledger, today=today, horizon_days=1, labels=labels)
            guard.issue()  # re-triggered before the first run returned
            return result

        assert guard.run(stale) is None
        assert guard.run(lambda ticket: project_cash_flow(ledger, today=today, horizon_days=1, labels=labels)).current_balance == Decimal("10")
