from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from proclubs.config.settings import settings as client_settings


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_name: str
    environment: str
    log_level: str
    cors_origins: tuple[str, ...]
    vendor_base_url: str
    vendor_timeout_seconds: float


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        app_name=os.getenv("PROXY_APP_NAME", "proclubs-edge-proxy"),
        environment=os.getenv("ENVIRONMENT", "local"),
        log_level=os.getenv("PROXY_LOG_LEVEL", "INFO").upper(),
        cors_origins=_split_csv(os.getenv("PROXY_CORS_ORIGINS", "*")),
        vendor_base_url=client_settings.EA_API_BASE_URL,
        vendor_timeout_seconds=client_settings.EA_PROXY_TIMEOUT_SECONDS,
    )
