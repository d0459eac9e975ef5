# -*- coding: utf-8 -*-
"""
Test classification override rules (return and bounced check)
"""

from datetime import date
from decimal import Decimal

from ledger.classification_rules import (
    EffectiveClassification,
    OverrideReason,
    RuleLabels,
    apply_rules,
    classify,
    default_labels,
    signed_value,
)
from ledger.models import Direction, Transaction


def _tx(tx_type, value="100.00", category_name=None, description=""):
    return Transaction(
        id="t1",
        date=date(2024, 3, 1),
        value=Decimal(value),
        type=tx_type,
        category_name=category_name,
        description=description,
    )


class TestReturnOverride:
    """Income in the return category counts as expense"""

    def test_income_in_return_category_becomes_expense(self, labels):
        result = classify(Direction.INCOME, Decimal("80"), category_name="Devolução", labels=labels)

        assert result.direction == Direction.EXPENSE
        assert result.value == Decimal("80")
        assert result.reason == OverrideReason.RETURN_OVERRIDE

    def test_match_ignores_case(self, labels):
        result = classify(Direction.INCOME, Decimal("80"), category_name="devolução", labels=labels)
        assert result.direction == Direction.EXPENSE

    def test_expense_in_return_category_unchanged(self, labels):
        result = classify(Direction.EXPENSE, Decimal("80"), category_name="Devolução", labels=labels)

        assert result == EffectiveClassification(Direction.EXPENSE, Decimal("80"))

    def test_similar_category_does_not_match(self, labels):
        result = classify(Direction.INCOME, Decimal("80"), category_name="Devoluções", labels=labels)
        assert result.direction == Direction.INCOME


class TestBouncedInstrumentOverride:
    """Expense mentioning a bounced check counts as income"""

    def test_expense_with_phrase_becomes_income(self, labels):
        result = classify(Direction.EXPENSE, Decimal("500"), description="Cheque Devolvido #55", labels=labels)

        assert result.direction == Direction.INCOME
        assert result.reason == OverrideReason.BOUNCED_INSTRUMENT_OVERRIDE

    def test_phrase_anywhere_any_case(self, labels):
        result = classify(Direction.EXPENSE, Decimal("500"), description="estorno: CHEQUE DEVOLVIDO banco", labels=labels)
        assert result.direction == Direction.INCOME

    def test_income_with_phrase_unchanged(self, labels):
        result = classify(Direction.INCOME, Decimal("500"), description="Cheque Devolvido", labels=labels)
        assert result.reason is None


class TestApplyRules:
    """Transaction level helpers"""

    def test_plain_transaction_unchanged(self, labels):
        tx = _tx(Direction.INCOME, category_name="Vendas")
        assert apply_rules(tx, labels) == EffectiveClassification(Direction.INCOME, Decimal("100.00"))

    def test_stored_type_is_not_modified(self, labels):
        tx = _tx(Direction.INCOME, category_name="Devolução")
        apply_rules(tx, labels)
        assert tx.type == Direction.INCOME

    def test_reapplying_gives_same_result(self, labels):
        tx = _tx(Direction.EXPENSE, description="Cheque Devolvido #55")
        assert apply_rules(tx, labels) == apply_rules(tx, labels)

    def test_signed_value(self, labels):
        assert signed_value(_tx(Direction.INCOME), labels) == Decimal("100.00")
        assert signed_value(_tx(Direction.EXPENSE), labels) == Decimal("-100.00")
        assert signed_value(_tx(Direction.INCOME, category_name="Devolução"), labels) == Decimal("-100.00")

    def test_string_inputs_are_coerced(self, labels):
        result = classify("expense", "12.50", description="Cheque Devolvido", labels=labels)
        assert result == EffectiveClassification(Direction.INCOME, Decimal("12.50"), OverrideReason.BOUNCED_INSTRUMENT_OVERRIDE)


class TestLabels:
    """Reserved labels"""

    def test_yaml_defaults(self):
        labels = default_labels()
        assert labels.return_category == "Devolução"
        assert labels.bounced_check_phrase == "Cheque Devolvido"

    def test_injected_labels(self):
        custom = RuleLabels(return_category="Estorno", bounced_check_phrase="Cheque Sem Fundo")

        assert classify(Direction.INCOME, Decimal("1"), category_name="Estorno", labels=custom).direction == Direction.EXPENSE
        assert classify(Direction.INCOME, Decimal("1"), category_name="Devolução", labels=custom).direction == Direction.INCOME
        assert classify(Direction.EXPENSE, Decimal("1"), description="cheque sem fundo", labels=custom).direction == Direction.INCOME
