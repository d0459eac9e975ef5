# -*- coding: utf-8 -*-
"""
Message Processing

Turns one free-text chat message into a ledger entry:

- transaction -> pending Transaction (awaits confirmation on the dashboard)
- sale        -> SaleDraft for the sales screen
- discard     -> None
"""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Union

from ledger.extraction.resolver import ExtractionResolver
from ledger.extraction.types import Classification, ExtractionRequest
from ledger.models import Transaction, TransactionStatus
from ledger.shared.locale_normalizer import to_canonical
from ledger.shared.reference_resolver import find_by_id
from ledger.workflow.types import SaleDraft

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


def _parse_value(raw: str) -> Optional[Decimal]:
    if not raw:
        return None
    try:
        return abs(to_canonical(raw))
    except ValueError:
        return None


def process_message(
    text: str,
    resolver: ExtractionResolver,
    categories=None,
    accounts=None,
    contacts=None,
    *,
    today: Optional[date] = None,
    id_factory: Callable[[], str] = _new_id,
) -> Union[Transaction, SaleDraft, None]:
    """
    Extract and route one message.

    Returns:
        Transaction, SaleDraft, or None when the message is not financial,
        no provider answered, or a transaction came back without a value
    """
    request = ExtractionRequest.build(text, categories, accounts, contacts)
    result = resolver.resolve(request)
    if result is None:
        return None
    if result.is_discard:
        logger.info("Message classified as discard")
        return None

    value = _parse_value(result.value)
    day = date.fromisoformat(result.date) if result.date else (today or date.today())

    if result.classification == Classification.SALE:
        return SaleDraft.from_result(result, value, day)

    if value is None:
        logger.warning(f"Transaction message without a usable value: {result.value!r}")
        return None

    category = find_by_id(request.categories, result.category_id)
    return Transaction(
        id=id_factory(),
        date=day,
        value=value,
        type=result.direction,
        status=TransactionStatus.PENDING,
        category_ref=result.category_id,
        account_ref=result.account_id,
        description=result.description,
        category_name=category.name if category else None,
        is_ai_extracted=True,
    )
