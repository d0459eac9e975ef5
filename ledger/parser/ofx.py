# -*- coding: utf-8 -*-
"""
OFX Statement Parsing

Extracts transaction blocks from OFX (Open Financial Exchange) exports.
Supported fields per <STMTTRN> block:
- TRNAMT: signed amount, comma or dot decimal separator
- DTPOSTED: YYYYMMDD[HHMMSS[.XXX]][[tz]]
- MEMO: description (falls back to NAME)
- FITID: bank-assigned id (synthesized when missing)

Blocks missing a required field are skipped, never fatal.
"""

import logging
import re
import secrets
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from ledger.parser.types import RawStatementRecord

logger = logging.getLogger(__name__)

_BLOCK_PATTERN = re.compile(r"<STMTTRN>([\s\S]*?)</STMTTRN>", re.IGNORECASE)
_DATE_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})")

_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def extract_tag_value(block: str, tag: str) -> Optional[str]:
    """Return the value after ``<TAG>`` up to the next ``<`` or line break."""
    match = re.search(rf"<{re.escape(tag)}>([^<\n\r]+)", block, re.IGNORECASE)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def parse_amount(raw: str) -> Decimal:
    """
    Convert an OFX amount string to Decimal.

    Only the first comma is treated as the decimal separator ("-230,50").
    """
    try:
        amount = Decimal(raw.replace(",", ".", 1))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {raw}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {raw}")
    return amount


def parse_posted_date(raw: str) -> date:
    """Slice ``YYYYMMDD...`` into a date, ignoring time and timezone suffix."""
    match = _DATE_PATTERN.match(raw.strip())
    if not match:
        raise ValueError(f"Invalid posted date: {raw}")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def clean_text(text: str) -> str:
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def _new_external_id(seen: set[str]) -> str:
    while True:
        token = secrets.token_hex(6)
        if token not in seen:
            return token


def parse_ofx(content: str) -> list[RawStatementRecord]:
    """
    Parse OFX text into statement records, in document order.

    Args:
        content: Raw OFX file content

    Returns:
        One record per well-formed block; an empty list when no block is found.
    """
    if not content:
        return []

    records: list[RawStatementRecord] = []
    seen_ids: set[str] = set()

    for index, match in enumerate(_BLOCK_PATTERN.finditer(content)):
        block = match.group(1)

        amount_raw = extract_tag_value(block, "TRNAMT")
        posted_raw = extract_tag_value(block, "DTPOSTED")
        memo_raw = extract_tag_value(block, "MEMO") or extract_tag_value(block, "NAME")
        fitid = extract_tag_value(block, "FITID")

        if not (amount_raw and posted_raw and memo_raw):
            logger.debug(f"Skipping statement block {index}: missing required field")
            continue

        try:
            amount = parse_amount(amount_raw)
            posted_date = parse_posted_date(posted_raw)
        except ValueError as e:
            logger.debug(f"Skipping statement block {index}: {e}")
            continue

        external_id = fitid or _new_external_id(seen_ids)
        seen_ids.add(external_id)

        records.append(
            RawStatementRecord(
                external_id=external_id,
                posted_date=posted_date,
                amount=amount,
                memo=clean_text(memo_raw),
            )
        )

    logger.info(f"Parsed {len(records)} statement records")
    return records
