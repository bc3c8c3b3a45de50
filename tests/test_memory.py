from __future__ import annotations

import threading

import pytest

from loader.core.memory import MemoryLedger


def test_append_increments_length():
    ledger = MemoryLedger()
    assert ledger.length() == 0
    ledger.append("A")
    assert ledger.length() == 1
    ledger.append(7919)
    assert len(ledger) == 2


def test_clear_resets_to_zero():
    ledger = MemoryLedger()
    for i in range(10):
        ledger.append(i)
    ledger.clear()
    assert ledger.length() == 0
    ledger.clear()
    assert ledger.length() == 0


@pytest.mark.parametrize("working_set_mb", [110, 111, 500])
def test_maybe_reclaim_at_or_above_threshold(working_set_mb):
    calls = []
    ledger = MemoryLedger(reclaim=lambda: calls.append(1))
    ledger.append("x")
    ledger.append("y")

    assert ledger.maybe_reclaim(working_set_mb) is True
    assert ledger.length() == 0
    assert calls == [1]


@pytest.mark.parametrize("working_set_mb", [0, 50, 109])
def test_maybe_reclaim_below_threshold(working_set_mb):
    calls = []
    ledger = MemoryLedger(reclaim=lambda: calls.append(1))
    ledger.append("x")

    assert ledger.maybe_reclaim(working_set_mb) is False
    assert ledger.length() == 1
    assert calls == []


def test_maybe_reclaim_custom_threshold():
    ledger = MemoryLedger(reclaim=lambda: None)
    ledger.append(1)
    assert ledger.maybe_reclaim(20, threshold_mb=30) is False
    assert ledger.maybe_reclaim(30, threshold_mb=30) is True
    assert ledger.length() == 0


def test_default_reclaim_hook_runs_gc():
    ledger = MemoryLedger()
    ledger.append("x")
    assert ledger.maybe_reclaim(200)
    assert ledger.length() == 0


def test_concurrent_appends_are_not_lost():
    ledger = MemoryLedger()

    def worker():
        for i in range(500):
            ledger.append(i)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert ledger.length() == 4000


def test_concurrent_reclaims_leave_consistent_count():
    ledger = MemoryLedger(reclaim=lambda: None)
    barrier = threading.Barrier(6)

    def worker():
        barrier.wait()
        for i in range(200):
            ledger.append(i)
            ledger.maybe_reclaim(120)

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert ledger.length() == 0
