# -*- coding: utf-8 -*-
"""
Statement record types.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class RawStatementRecord:
    """One transaction block parsed from a bank statement export."""

    external_id: str                       # FITID, or a synthesized token
    posted_date: date                      # DTPOSTED sliced to a calendar date
    amount: Decimal                        # signed; sign encodes direction
    memo: str                              # MEMO, falling back to NAME

    def to_dict(self) -> dict:
        return {
            "external_id": self.external_id,
            "posted_date": self.posted_date.isoformat(),
            "amount": str(self.amount),
            "memo": self.memo,
        }
