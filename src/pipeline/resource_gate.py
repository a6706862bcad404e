# src/pipeline/resource_gate.py — v1
"""Mana pool gating step runs, plus the experience reward counter."""

from __future__ import annotations

import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_RUN_COST = 20
DEFAULT_SUCCESS_REWARD = 50


class ResourceSnapshot(BaseModel):
    """Both counters at one point in time."""

    mana: int
    experience: int


class ResourceGate:
    """Owns the mana pool and the experience counter.

    The pool never goes below 0: a debit larger than the pool is refused,
    not clamped. No ceiling is enforced here; that belongs to the hosting
    application, which may read and write both counters.
    """

    def __init__(self, mana: int = 0, experience: int = 0) -> None:
        self._mana = max(0, mana)
        self._experience = experience

    @property
    def mana(self) -> int:
        return self._mana

    @mana.setter
    def mana(self, value: int) -> None:
        self._mana = max(0, value)

    @property
    def experience(self) -> int:
        return self._experience

    @experience.setter
    def experience(self, value: int) -> None:
        self._experience = value

    def can_afford(self, cost: int) -> bool:
        return self._mana >= cost

    def try_debit(self, cost: int) -> bool:
        """Subtract ``cost`` from the pool if it covers it.

        Returns:
            True if debited, False (and no change) otherwise.
        """
        if cost < 0:
            raise ValueError(f"cost must be >= 0, got {cost}")
        if self._mana < cost:
            logger.debug("Debit of %d refused (pool=%d)", cost, self._mana)
            return False
        self._mana -= cost
        return True

    def credit(self, amount: int) -> None:
        """Add ``amount`` to the experience counter."""
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        self._experience += amount

    def snapshot(self) -> ResourceSnapshot:
        return ResourceSnapshot(mana=self._mana, experience=self._experience)
