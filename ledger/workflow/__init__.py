# -*- coding: utf-8 -*-
"""
Import Workflow Module

Review queue for statement imports and routing of free-text messages.

Usage:
    from ledger.workflow import ImportReview
    review = ImportReview.from_statement(ofx_text, resolver, categories, accounts)
    review.classify_all()
    review.commit(ledger)
"""

from ledger.workflow.errors import ReviewError, ReviewErrorCode
from ledger.workflow.import_review import ImportReview
from ledger.workflow.message import process_message
from ledger.workflow.store import ReviewStore
from ledger.workflow.types import SaleDraft, TransactionCandidate, TransactionSink

__all__ = [
    "ImportReview",
    "ReviewError",
    "ReviewErrorCode",
    "ReviewStore",
    "SaleDraft",
    "TransactionCandidate",
    "TransactionSink",
    "process_message",
]
