from __future__ import annotations

import os


DEFAULT_EA_API_BASE_URL = "https://proclubs.ea.com/api/fc"
DEFAULT_PROXY_URL = "http://localhost:8000"

_CLIENT_MODE_ALIASES = {
    "proxy": "proxy",
    "edge": "proxy",
    "direct": "direct",
    "vendor": "direct",
}


def _optional_env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value is not None:
            cleaned = value.strip()
            if cleaned:
                return cleaned
    return None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def normalize_client_mode(mode: str) -> str:
    normalized = mode.strip().lower()
    canonical = _CLIENT_MODE_ALIASES.get(normalized)
    if canonical is None:
        supported = ", ".join(sorted(_CLIENT_MODE_ALIASES.keys()))
        raise ValueError(f"Unsupported EA_CLIENT_MODE='{mode}'. Supported values: {supported}")
    return canonical


class Settings:
    @property
    def EA_CLIENT_MODE(self) -> str:
        return (os.getenv("EA_CLIENT_MODE") or "proxy").strip().lower()

    @property
    def EA_API_BASE_URL(self) -> str:
        return (_optional_env("EA_API_BASE_URL") or DEFAULT_EA_API_BASE_URL).rstrip("/")

    @property
    def PROCLUBS_PROXY_URL(self) -> str:
        return (_optional_env("PROCLUBS_PROXY_URL", "EA_PROXY_URL") or DEFAULT_PROXY_URL).rstrip("/")

    @property
    def HTTP_TIMEOUT_SECONDS(self) -> float:
        return _float_env("HTTP_TIMEOUT_SECONDS", 15.0)

    @property
    def HTTP_MAX_RETRIES(self) -> int:
        return _int_env("HTTP_MAX_RETRIES", 2)

    @property
    def HTTP_BACKOFF_FACTOR(self) -> float:
        return _float_env("HTTP_BACKOFF_FACTOR", 0.5)

    @property
    def EA_PROXY_TIMEOUT_SECONDS(self) -> float:
        return _float_env("EA_PROXY_TIMEOUT_SECONDS", 15.0)

    def client_mode(self) -> str:
        return normalize_client_mode(self.EA_CLIENT_MODE)

    def validate_http(self) -> None:
        if self.HTTP_TIMEOUT_SECONDS <= 0:
            raise RuntimeError("HTTP_TIMEOUT_SECONDS must be greater than zero.")
        if self.HTTP_MAX_RETRIES < 0:
            raise RuntimeError("HTTP_MAX_RETRIES must not be negative.")
        if self.HTTP_BACKOFF_FACTOR < 0:
            raise RuntimeError("HTTP_BACKOFF_FACTOR must not be negative.")


settings = Settings()
