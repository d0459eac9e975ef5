# -*- coding: utf-8 -*-
"""Review queue snapshots kept in the KV store between requests."""

import logging
from typing import Optional

from ledger.config import REVIEW_SESSION_TTL
from ledger.extraction.resolver import ExtractionResolver
from ledger.services.kv_store import KVStore
from ledger.workflow.import_review import ImportReview

logger = logging.getLogger(__name__)


class ReviewStore:
    """Saves and restores ``ImportReview`` queues by session id."""

    KEY_PREFIX = "review"

    def __init__(self, kv: Optional[KVStore] = None, ttl: int = REVIEW_SESSION_TTL):
        self.kv = kv or KVStore()
        self.ttl = ttl

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}:{session_id}"

    def save(self, session_id: str, review: ImportReview) -> bool:
        ok = self.kv.set(self._key(session_id), review.to_dict(), ttl=self.ttl)
        if ok:
            logger.debug(f"Saved review {session_id} ({len(review)} candidates)")
        return ok

    def load(self, session_id: str, resolver: Optional[ExtractionResolver] = None) -> Optional[ImportReview]:
        data = self.kv.get(self._key(session_id))
        if not isinstance(data, dict):
            return None
        return ImportReview.from_dict(data, resolver)

    def clear(self, session_id: str) -> bool:
        return self.kv.delete(self._key(session_id))
