# -*- coding: utf-8 -*-
"""
Extraction Module

Free text -> ExtractionResult via an ordered provider fallback chain:
- the first provider answering with a JSON object wins
- names are bound to ids by exact, case-insensitive match only
- failures degrade to None, never to an exception
"""

from .resolver import ExtractionResolver, build_default_resolver, build_result
from .types import Classification, ExtractionRequest, ExtractionResult

__all__ = [
    "ExtractionResolver",
    "build_default_resolver",
    "build_result",
    "Classification",
    "ExtractionRequest",
    "ExtractionResult",
]
