from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv


load_dotenv()


class Settings:
    """Application settings loaded from environment variables.

    The workload sizes and the reclamation threshold are fixed; only the
    deployment-level choices (environment, mode, bind address) come from env.
    """

    app_env: str = os.getenv("APP_ENV", "development")
    workload_mode: str = os.getenv("WORKLOAD_MODE", "prime")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    string_length: int = 8192
    nth_prime: int = 1000
    reclaim_threshold_mb: int = 110

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
