# -*- coding: utf-8 -*-
"""
Import Review

Holds statement lines as editable candidates until a reviewer commits them.

Flow:
1. seed / from_statement: one candidate per parsed record
2. classify_all / reclassify: optional AI refinement through the resolver
3. update / discard / restore: reviewer edits
4. commit: confirmed transactions handed to the sink in one batch
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledger.extraction.resolver import ExtractionResolver
from ledger.extraction.types import Classification, ExtractionRequest, ExtractionResult
from ledger.models import Direction, Transaction, TransactionStatus
from ledger.parser import parse_statement
from ledger.parser.types import RawStatementRecord
from ledger.services.supersede import LatestOnly, Ticket
from ledger.shared.locale_normalizer import normalize_date, to_canonical
from ledger.shared.reference_resolver import find_by_id, snapshot
from ledger.workflow.errors import ReviewError, ReviewErrorCode
from ledger.workflow.types import TransactionCandidate, TransactionSink

logger = logging.getLogger(__name__)

REFINE_PREFIX = "Transação Bancária: "

EDITABLE_FIELDS = ("category_id", "account_id", "description", "direction", "value", "date")


class ImportReview:
    """Ordered queue of candidates keyed by external id."""

    def __init__(
        self,
        resolver: Optional[ExtractionResolver] = None,
        categories=None,
        accounts=None,
    ):
        self.resolver = resolver
        self.categories = snapshot(categories)
        self.accounts = snapshot(accounts)
        self._candidates: "OrderedDict[str, TransactionCandidate]" = OrderedDict()
        self._lock = threading.Lock()
        self._batch_guard = LatestOnly("classify_all")
        self._item_guards: dict[str, LatestOnly] = {}

    @classmethod
    def from_statement(cls, content: str, resolver: Optional[ExtractionResolver] = None, categories=None, accounts=None) -> "ImportReview":
        review = cls(resolver, categories, accounts)
        review.seed(parse_statement(content))
        return review

    # ------------------------------------------------------------------
    # Queue access

    @property
    def candidates(self) -> list[TransactionCandidate]:
        with self._lock:
            return list(self._candidates.values())

    def __len__(self) -> int:
        return len(self._candidates)

    def get(self, external_id: str) -> TransactionCandidate:
        candidate = self._candidates.get(external_id)
        if candidate is None:
            raise ReviewError.from_code(ReviewErrorCode.UNKNOWN_CANDIDATE, external_id=external_id)
        return candidate

    @property
    def default_account_id(self) -> str:
        return self.accounts[0].id if self.accounts else ""

    def seed(self, records: Iterable[RawStatementRecord]) -> list[TransactionCandidate]:
        """Add one candidate per record. Records already queued are replaced."""
        added = []
        with self._lock:
            for record in records:
                candidate = TransactionCandidate.from_record(record, self.default_account_id)
                self._candidates[record.external_id] = candidate
                added.append(candidate)
        logger.info(f"Seeded {len(added)} import candidates")
        return added

    # ------------------------------------------------------------------
    # AI refinement

    def _refine(self, candidate: TransactionCandidate) -> Optional[ExtractionResult]:
        if self.resolver is None:
            return None
        request = ExtractionRequest(
            text=f"{REFINE_PREFIX}{candidate.memo}",
            categories=self.categories,
            accounts=self.accounts,
        )
        return self.resolver.resolve(request)

    def _merge(self, candidate: TransactionCandidate, result: Optional[ExtractionResult], *, replace: bool = False) -> bool:
        if result is None:
            return False
        with self._lock:
            candidate.classification = result.classification
            if replace:
                candidate.category_id = result.category_id or ""
            elif result.category_id:
                candidate.category_id = result.category_id
            if result.suggested_category:
                candidate.suggested_category = result.suggested_category
            if result.description:
                candidate.description = result.description
            candidate.is_ai_refined = True
        return True

    def classify_all(self) -> int:
        """
        Refine every candidate not yet classified or bound to a category,
        one at a time.

        A newer call (or ``cancel``) stops this one before the next
        candidate; a result that arrives after that is dropped.

        Returns:
            Number of candidates refined
        """
        ticket = self._batch_guard.issue()
        refined = 0
        for candidate in self.candidates:
            if ticket.superseded:
                logger.info("classify_all superseded, stopping")
                break
            if candidate.category_id or candidate.discarded or candidate.classification is not None:
                continue
            result = self._refine(candidate)
            if self._stale(ticket):
                break
            if self._merge(candidate, result):
                refined += 1
        logger.info(f"classify_all refined {refined}/{len(self)} candidates")
        return refined

    def _stale(self, ticket: Ticket) -> bool:
        if ticket.superseded:
            logger.info(f"Dropping superseded refinement (ticket {ticket.number})")
            return True
        return False

    def reclassify(self, external_id: str) -> Optional[TransactionCandidate]:
        """Refine one candidate again; its category is replaced by the new result."""
        candidate = self.get(external_id)
        guard = self._item_guards.setdefault(external_id, LatestOnly(f"reclassify {external_id}"))
        result = guard.run(lambda _ticket: self._refine(candidate))
        self._merge(candidate, result, replace=True)
        return candidate

    def cancel(self) -> None:
        """Stop a running classify_all."""
        self._batch_guard.cancel()

    # ------------------------------------------------------------------
    # Reviewer edits

    def update(self, external_id: str, **fields) -> TransactionCandidate:
        candidate = self.get(external_id)
        changes = {}
        for name, raw in fields.items():
            if name not in EDITABLE_FIELDS:
                raise ReviewError.from_code(ReviewErrorCode.INVALID_FIELD, field=name)
            changes[name] = self._coerce(name, raw)
        with self._lock:
            for name, value in changes.items():
                setattr(candidate, name, value)
            # a hand-picked category overrides an AI discard
            if changes.get("category_id") and candidate.classification == Classification.DISCARD:
                candidate.classification = Classification.TRANSACTION
        return candidate

    @staticmethod
    def _coerce(name: str, raw):
        try:
            if name == "value":
                value = raw if isinstance(raw, Decimal) else to_canonical(raw)
                if value < 0:
                    raise ValueError("negative")
                return value
            if name == "direction":
                return raw if isinstance(raw, Direction) else Direction.from_string(raw)
            if name == "date":
                if isinstance(raw, date):
                    return raw
                iso = normalize_date(str(raw))
                if iso is None:
                    raise ValueError("not a date")
                return date.fromisoformat(iso)
        except (TypeError, ValueError) as e:
            raise ReviewError.from_code(ReviewErrorCode.INVALID_VALUE, field=name, value=raw) from e
        return "" if raw is None else str(raw)

    def discard(self, external_id: str) -> TransactionCandidate:
        candidate = self.get(external_id)
        with self._lock:
            candidate.discarded = True
        return candidate

    def restore(self, external_id: str) -> TransactionCandidate:
        """Bring back a candidate discarded by the reviewer or by extraction."""
        candidate = self.get(external_id)
        with self._lock:
            candidate.discarded = False
            if candidate.classification == Classification.DISCARD:
                candidate.classification = Classification.TRANSACTION
        logger.info(f"Restored import candidate {external_id}")
        return candidate

    # ------------------------------------------------------------------
    # Commit

    def to_transaction(self, candidate: TransactionCandidate) -> Transaction:
        if candidate.value is None:
            raise ReviewError.from_code(ReviewErrorCode.MISSING_VALUE, external_id=candidate.external_id)
        category = find_by_id(self.categories, candidate.category_id)
        return Transaction(
            id=candidate.external_id,
            date=candidate.date,
            value=candidate.value,
            type=candidate.direction,
            status=TransactionStatus.CONFIRMED,
            category_ref=candidate.category_id or None,
            account_ref=candidate.account_id or None,
            description=candidate.description,
            category_name=category.name if category else None,
            is_ai_extracted=candidate.is_ai_refined,
        )

    def commit(self, sink: TransactionSink) -> list[Transaction]:
        """
        Persist every remaining candidate in a single ``save_all`` call.

        Discarded candidates (by the reviewer or by extraction) are left out.
        Sink errors propagate and the queue is kept for a retry.
        """
        transactions = [self.to_transaction(c) for c in self.candidates if c.committable]
        sink.save_all(transactions)
        with self._lock:
            self._candidates.clear()
        logger.info(f"Committed {len(transactions)} transactions")
        return transactions

    # ------------------------------------------------------------------
    # Snapshots

    def to_dict(self) -> dict:
        return {
            "categories": [{"id": c.id, "name": c.name} for c in self.categories],
            "accounts": [{"id": a.id, "name": a.name} for a in self.accounts],
            "candidates": [c.to_dict() for c in self.candidates],
        }

    @classmethod
    def from_dict(cls, data: dict, resolver: Optional[ExtractionResolver] = None) -> "ImportReview":
        review = cls(resolver, data.get("categories"), data.get("accounts"))
        for row in data.get("candidates") or []:
            candidate = TransactionCandidate.from_dict(row)
            review._candidates[candidate.external_id] = candidate
        return review
