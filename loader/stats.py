from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from typing import Callable, Optional

import psutil

from loader.core.memory import MemoryLedger


REPORT_TEMPLATE = (
    "Machine: {machine} \n"
    "Logical processors: {cpus}\n"
    "{label} in memory: {count}\n"
    "Memory working set: {mb} MB"
)


class HostEnvironmentError(RuntimeError):
    pass


def _process_working_set() -> int:
    return psutil.Process().memory_info().rss


def _logical_cpu_count() -> int:
    # Affinity reflects the CPUs this process may actually run on.
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0))
    count = os.cpu_count()
    if count is None:
        raise HostEnvironmentError("Logical processor count is unavailable")
    return count


@dataclass(frozen=True)
class StatsSnapshot:
    machine: str
    logical_processors: int
    items_in_memory: int
    working_set_bytes: int
    item_label: str = "Primes"

    @property
    def working_set_mb(self) -> int:
        return self.working_set_bytes // 1024 // 1024

    def render(self) -> str:
        return REPORT_TEMPLATE.format(
            machine=self.machine,
            cpus=self.logical_processors,
            label=self.item_label,
            count=self.items_in_memory,
            mb=self.working_set_mb,
        )


class StatsReporter:
    def __init__(
        self,
        ledger: MemoryLedger,
        item_label: str,
        host_name: Optional[Callable[[], str]] = None,
        cpu_count: Optional[Callable[[], int]] = None,
        working_set: Optional[Callable[[], int]] = None,
    ) -> None:
        self.ledger = ledger
        self.item_label = item_label
        self._host_name = host_name or socket.gethostname
        self._cpu_count = cpu_count or _logical_cpu_count
        self._working_set = working_set or _process_working_set

    def probe(self) -> None:
        """Read every host value once so a broken environment fails at startup."""
        try:
            self._host_name()
            self._cpu_count()
            self._working_set()
        except Exception as exc:
            raise HostEnvironmentError(f"Host environment read failed: {exc}") from exc

    def working_set_mb(self) -> int:
        return self._working_set() // 1024 // 1024

    def snapshot(self) -> StatsSnapshot:
        return StatsSnapshot(
            machine=self._host_name(),
            logical_processors=self._cpu_count(),
            items_in_memory=self.ledger.length(),
            working_set_bytes=self._working_set(),
            item_label=self.item_label,
        )
