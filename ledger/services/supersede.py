# -*- coding: utf-8 -*-
"""
Last-issued-wins guard for re-triggerable operations.

Each trigger takes a ticket. Issuing a new ticket supersedes every older
one, so a slow run finishing late can detect that its result is stale and
drop it instead of overwriting a fresher one.
"""

import logging
import threading
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Ticket:
    def __init__(self, guard: "LatestOnly", number: int):
        self._guard = guard
        self.number = number

    @property
    def superseded(self) -> bool:
        return self._guard.current != self.number

    def __repr__(self) -> str:
        return f"Ticket({self.number}, superseded={self.superseded})"


class LatestOnly:
    """Issues tickets; only the most recently issued one is current."""

    def __init__(self, name: str = "operation"):
        self.name = name
        self._lock = threading.Lock()
        self._current = 0

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    def issue(self) -> Ticket:
        with self._lock:
            self._current += 1
            return Ticket(self, self._current)

    def cancel(self) -> None:
        """Supersede any in-flight ticket without starting a new run."""
        self.issue()

    def run(self, func: Callable[[Ticket], T]) -> Optional[T]:
        """
        Run ``func`` with a fresh ticket.

        Returns:
            The result, or None when a newer run was issued meanwhile
        """
        ticket = self.issue()
        result = func(ticket)
        if ticket.superseded:
            logger.info(f"Dropping stale {self.name} result (ticket {ticket.number})")
            return None
        return result
