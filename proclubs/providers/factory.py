from __future__ import annotations

from proclubs.config.settings import settings
from proclubs.providers.ea_clubs import ClubsApiClient


def get_clubs_client() -> ClubsApiClient:
    settings.validate_http()
    mode = settings.client_mode()
    if mode == "proxy":
        return ClubsApiClient(base_url=settings.PROCLUBS_PROXY_URL)
    if mode == "direct":
        return ClubsApiClient(base_url=settings.EA_API_BASE_URL, direct=True)
    raise ValueError(f"Unsupported EA_CLIENT_MODE='{settings.EA_CLIENT_MODE}'")
