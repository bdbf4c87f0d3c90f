from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ProxyError(Exception):
    message: str
    status: int
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


def error_payload(message: str, details: Any | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": message}
    if details is not None:
        payload["details"] = details
    return payload
