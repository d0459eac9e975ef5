# -*- coding: utf-8 -*-
"""
Statement Parser Module

Converts bank-statement exports into ``RawStatementRecord`` sequences.
Parsing is tolerant: malformed blocks are skipped and an unreadable
document yields an empty list ("nothing to import").

Usage:
    from ledger.parser import parse_statement
    records = parse_statement(ofx_text)
"""

import logging
from pathlib import Path
from typing import Union

from ledger.parser.ofx import parse_ofx
from ledger.parser.types import RawStatementRecord

logger = logging.getLogger(__name__)

# Brazilian bank exports are frequently latin-1 encoded
_ENCODINGS = ("utf-8", "latin-1")


def parse_statement(content: str) -> list[RawStatementRecord]:
    """Parse statement text into normalized records."""
    return parse_ofx(content)


def parse_statement_file(path: Union[str, Path]) -> list[RawStatementRecord]:
    """
    Read a statement file and parse it.

    Tries each known encoding in order; latin-1 always decodes, so the
    file is never rejected for its encoding.
    """
    data = Path(path).read_bytes()
    for encoding in _ENCODINGS:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            logger.debug(f"Statement {path} is not {encoding}")
            continue
        return parse_statement(text)
    return []


__all__ = [
    "parse_statement",
    "parse_statement_file",
    "RawStatementRecord",
]
