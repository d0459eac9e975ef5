# -*- coding: utf-8 -*-
"""
Review Errors

Caller mistakes while editing or committing an import review.
Resolver and parser problems never surface here; they degrade silently.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReviewErrorCode(Enum):
    UNKNOWN_CANDIDATE = "unknown_candidate"
    INVALID_FIELD = "invalid_field"
    INVALID_VALUE = "invalid_value"
    MISSING_VALUE = "missing_value"


ERROR_MESSAGES = {
    ReviewErrorCode.UNKNOWN_CANDIDATE: "No candidate with id {external_id}",
    ReviewErrorCode.INVALID_FIELD: "Field {field} cannot be edited",
    ReviewErrorCode.INVALID_VALUE: "Invalid value for {field}: {value}",
    ReviewErrorCode.MISSING_VALUE: "Candidate {external_id} has no value",
}


@dataclass
class ReviewError(Exception):
    code: ReviewErrorCode
    message: str
    details: Optional[dict] = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_code(cls, code: ReviewErrorCode, **kwargs) -> "ReviewError":
        template = ERROR_MESSAGES.get(code, "Review error")
        message = template.format(**kwargs) if kwargs else template
        return cls(code=code, message=message, details=kwargs if kwargs else None)
