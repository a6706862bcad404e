# tests/unit/pipeline/test_resource_gate.py — v1
"""Tests for pipeline/resource_gate.py."""

from __future__ import annotations

import pytest

from reviewchain.pipeline.resource_gate import (
    DEFAULT_RUN_COST,
    DEFAULT_SUCCESS_REWARD,
    ResourceGate,
    ResourceSnapshot,
)


class TestResourceGate:
    def test_defaults(self):
        assert DEFAULT_RUN_COST == 20
        assert DEFAULT_SUCCESS_REWARD == 50

    def test_debit(self):
        gate = ResourceGate(mana=60)
        assert gate.try_debit(20) is True
        assert gate.mana == 40

    def test_debit_refused_when_short(self):
        gate = ResourceGate(mana=15)
        assert gate.can_afford(20) is False
        assert gate.try_debit(20) is False
        assert gate.mana == 15

    def test_debit_exact_pool(self):
        gate = ResourceGate(mana=20)
        assert gate.try_debit(20) is True
        assert gate.mana == 0

    def test_negative_amounts_rejected(self):
        gate = ResourceGate(mana=10)
        with pytest.raises(ValueError):
            gate.try_debit(-1)
        with pytest.raises(ValueError):
            gate.credit(-1)

    def test_credit(self):
        gate = ResourceGate(experience=1200)
        gate.credit(50)
        assert gate.experience == 1250

    def test_pool_never_negative(self):
        gate = ResourceGate(mana=-5)
        assert gate.mana == 0
        gate.mana = -10
        assert gate.mana == 0

    def test_host_can_write_counters(self):
        gate = ResourceGate()
        gate.mana = 500
        gate.experience = 7
        assert gate.snapshot() == ResourceSnapshot(mana=500, experience=7)
