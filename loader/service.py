from __future__ import annotations

import logging
from typing import Optional

from config.settings import Settings, get_settings
from loader.core.memory import MemoryLedger
from loader.metrics import LEDGER_ITEMS, LEDGER_RECLAIMS
from loader.stats import StatsReporter, StatsSnapshot
from loader.workload import RandomSource, WorkItem, WorkloadGenerator, WorkloadMode


logger = logging.getLogger(__name__)


class LoadService:
    """One generator, one ledger and one reporter shared by all requests."""

    def __init__(
        self,
        generator: WorkloadGenerator,
        ledger: MemoryLedger,
        reporter: StatsReporter,
        reclaim_threshold_mb: int = 110,
    ) -> None:
        self.generator = generator
        self.ledger = ledger
        self.reporter = reporter
        self.reclaim_threshold_mb = reclaim_threshold_mb

    @property
    def mode(self) -> WorkloadMode:
        return self.generator.mode

    def workout(self) -> WorkItem:
        item = self.generator.run()
        self.ledger.append(item)

        if self.mode.reclaims:
            cleared = self.ledger.maybe_reclaim(
                self.reporter.working_set_mb(), self.reclaim_threshold_mb
            )
            if cleared:
                LEDGER_RECLAIMS.inc()

        LEDGER_ITEMS.set(self.ledger.length())
        return item

    def stats(self) -> StatsSnapshot:
        return self.reporter.snapshot()


def build_service(
    settings: Optional[Settings] = None,
    rng: Optional[RandomSource] = None,
    reporter_factory=StatsReporter,
) -> LoadService:
    settings = settings or get_settings()
    mode = WorkloadMode.parse(settings.workload_mode)

    generator = WorkloadGenerator(
        mode,
        string_length=settings.string_length,
        nth_prime=settings.nth_prime,
        rng=rng,
    )
    ledger: MemoryLedger = MemoryLedger()
    reporter = reporter_factory(ledger, mode.item_label)
    reporter.probe()

    logger.info(
        "Service built: mode=%s threshold=%sMB reclaims=%s",
        mode.value,
        settings.reclaim_threshold_mb,
        mode.reclaims,
    )
    return LoadService(generator, ledger, reporter, settings.reclaim_threshold_mb)
