# -*- coding: utf-8 -*-
"""
Reference name binding.

Binds names produced by the extraction step to the ids of the caller's
categories, accounts and contacts. Matching is case-insensitive and exact:
a miss leaves the id unbound so the raw name stays visible for review.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Union


@dataclass(frozen=True)
class ReferenceItem:
    """A selectable reference entry (category, account or contact)."""

    id: str
    name: str

    @classmethod
    def from_value(cls, value: Union["ReferenceItem", Mapping]) -> "ReferenceItem":
        if isinstance(value, ReferenceItem):
            return value
        return cls(id=str(value["id"]), name=str(value.get("name") or ""))


def _normalize_name(value: Optional[str]) -> str:
    return (value or "").strip().casefold()


def snapshot(items: Iterable[Union[ReferenceItem, Mapping]] | None) -> tuple[ReferenceItem, ...]:
    """Copy a reference list into an immutable tuple."""
    return tuple(ReferenceItem.from_value(item) for item in (items or ()))


def find_by_name(items: Iterable[ReferenceItem], name: Optional[str]) -> Optional[ReferenceItem]:
    """
    Return the first item whose name equals ``name`` ignoring case.

    Empty names never match. Partial names never match ("Venda" does not
    bind "Vendas").
    """
    wanted = _normalize_name(name)
    if not wanted:
        return None
    for item in items:
        if _normalize_name(item.name) == wanted:
            return item
    return None


def resolve_id(items: Iterable[ReferenceItem], name: Optional[str]) -> Optional[str]:
    item = find_by_name(items, name)
    return item.id if item else None


def names(items: Iterable[ReferenceItem]) -> list[str]:
    return [item.name for item in items if item.name]


def find_by_id(items: Iterable[ReferenceItem], item_id: Optional[str]) -> Optional[ReferenceItem]:
    if not item_id:
        return None
    for item in items:
        if item.id == item_id:
            return item
    return None
