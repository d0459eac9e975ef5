from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from ledger.classification_rules import RuleLabels

FIXTURES = Path(__file__).parent / "fixtures"


def _top_level_tests_group(path: Path) -> str | None:
    parts = path.parts
    try:
        tests_index = parts.index("tests")
    except ValueError:
        return None
    if tests_index + 1 >= len(parts):
        return None
    return parts[tests_index + 1]


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    for item in items:
        group = _top_level_tests_group(Path(str(item.fspath)))
        if group in ("unit", "parser", "extraction"):
            item.add_marker(pytest.mark.unit)
        elif group == "integration":
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def labels() -> RuleLabels:
    return RuleLabels(return_category="Devolução", bounced_check_phrase="Cheque Devolvido")


@pytest.fixture
def today() -> date:
    return date(2024, 3, 1)


@pytest.fixture
def categories() -> list[dict]:
    return [
        {"id": "c1", "name": "Vendas"},
        {"id": "c2", "name": "Aluguel"},
        {"id": "c3", "name": "Devolução"},
    ]


@pytest.fixture
def accounts() -> list[dict]:
    return [
        {"id": "a1", "name": "Conta Corrente"},
        {"id": "a2", "name": "Caixa"},
    ]


@pytest.fixture
def sample_ofx() -> str:
    return (FIXTURES / "sample_statement.ofx").read_text(encoding="utf-8")
