# -*- coding: utf-8 -*-
"""
Currency and date locale conversion (pt-BR).

- "R$ 1.234,56" <-> Decimal("1234.56")
- "14/12/25" -> "2025-12-14" -> "14/12/2025"

All functions are pure and stateless.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Union

_CURRENCY_PREFIX = re.compile(r"^R\$", re.IGNORECASE)
_THOUSANDS_ONLY = re.compile(r"^[1-9]\d{0,2}(?:\.\d{3}){2,}$")
_CANONICAL = re.compile(r"^\d+(?:\.\d+)?$")
_LOCALE_DATE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})\s*$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def to_canonical(value: Union[str, int, float, Decimal]) -> Decimal:
    """
    Convert a pt-BR formatted amount to a canonical Decimal.

    Accepts "1.234,56", "R$ 1.234,56", "-R$ 10,00", "1234.56" and plain
    integers like "100002" (whole currency units, never re-read digit by
    digit). A value without a comma is read as thousands only when it has
    two or more dot groups ("1.234.567"); a single dot is a decimal point,
    so canonical strings such as "1.500" read back unchanged.

    Raises:
        ValueError: the value is not a recognizable amount
    """
    if isinstance(value, (int, float)):
        value = Decimal(str(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Invalid amount: {value!r}")
        return value

    text = (value or "").replace("\u00a0", " ").strip()
    negative = text.startswith("-")
    if negative:
        text = text[1:].strip()
    text = _CURRENCY_PREFIX.sub("", text).replace(" ", "")
    if text.startswith("-"):
        negative = not negative
        text = text[1:]

    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    elif _THOUSANDS_ONLY.match(text):
        text = text.replace(".", "")

    if not _CANONICAL.match(text):
        raise ValueError(f"Invalid amount: {value!r}")

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    return -amount if negative else amount


def to_locale(value: Union[str, int, float, Decimal], *, currency: bool = False) -> str:
    """
    Format an amount for display: Decimal("1234.5") -> "1.234,50".

    With ``currency=True`` the "R$ " prefix is added ("-R$ 10,00" for
    negatives). At least two decimals are shown; extra precision is kept
    ("0,005") so the text reads back as the same amount.
    """
    amount = to_canonical(value)
    places = max(2, -amount.as_tuple().exponent)
    grouped = f"{abs(amount):,.{places}f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 else ""
    if currency:
        return f"{sign}R$ {grouped}"
    return f"{sign}{grouped}"


def locale_date_to_iso(text: str) -> str:
    """
    Convert DD/MM/YY or DD/MM/YYYY to YYYY-MM-DD.

    Two-digit years map to 20YY ("14/12/25" -> "2025-12-14").

    Raises:
        ValueError: not a valid locale date
    """
    match = _LOCALE_DATE.match(text or "")
    if not match:
        raise ValueError(f"Invalid date: {text!r}")
    day, month, year = match.groups()
    full_year = int(year) + 2000 if len(year) == 2 else int(year)
    return date(full_year, int(month), int(day)).isoformat()


def iso_to_locale_date(text: str) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY; non-ISO input is returned unchanged."""
    if not text:
        return "-"
    if not _ISO_DATE.match(text):
        return text
    year, month, day = text.split("-")
    return f"{day}/{month}/{year}"


def normalize_date(text: str | None) -> str | None:
    """Return an ISO date for ISO or DD/MM/YY[YY] input, else None."""
    if not text:
        return None
    candidate = text.strip()
    if _ISO_DATE.match(candidate):
        try:
            return date.fromisoformat(candidate).isoformat()
        except ValueError:
            return None
    try:
        return locale_date_to_iso(candidate)
    except ValueError:
        return None
