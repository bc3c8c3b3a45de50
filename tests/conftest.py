from __future__ import annotations

import random

import pytest

from config.settings import Settings
from loader.stats import StatsReporter


MB = 1024 * 1024


class FakeHost:
    def __init__(self, working_set_mb: int = 50) -> None:
        self.working_set_mb = working_set_mb

    def reporter(self, ledger, item_label):
        return StatsReporter(
            ledger,
            item_label,
            host_name=lambda: "test-host",
            cpu_count=lambda: 4,
            working_set=lambda: self.working_set_mb * MB,
        )


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def make_settings(mode: str, app_env: str = "production") -> Settings:
    settings = Settings()
    settings.workload_mode = mode
    settings.app_env = app_env
    return settings


@pytest.fixture
def settings_for():
    return make_settings
