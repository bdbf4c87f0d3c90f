"""Vendor-hosted image URLs for crests, flags and badges.

Every function is pure and accepts partially populated (or missing) domain
objects. Anything that cannot be resolved falls back to ``PLACEHOLDER_IMAGE_URL``.
"""
from __future__ import annotations

from urllib.parse import urlsplit

from proclubs.domain.models import ClubInfo, CustomKit


ASSET_HOST = "eafc24.content.easports.com"
ASSET_PATH_PREFIX = "/fifa/fltOnlineAssets/"

CREST_BASE_URL = (
    f"https://{ASSET_HOST}{ASSET_PATH_PREFIX}"
    "24B23FDE-7835-41C2-87A2-F453DFDB2E82/2024/fcweb/crests/256x256/l"
)
FLAG_BASE_URL = (
    "https://media.contentapi.ea.com/content/dam/ea/fifa/fifa-21/ratings-collective/f20assets/country-flags"
)
DIVISION_CREST_BASE_URL = "https://media.contentapi.ea.com/content/dam/eacom/fc/pro-clubs/divisioncrest"
REPUTATION_TIER_BASE_URL = "https://media.contentapi.ea.com/content/dam/eacom/fc/pro-clubs/reputation"

# Generic "no crest" shield served by the same asset host.
PLACEHOLDER_IMAGE_URL = f"{CREST_BASE_URL}0.png"

CUSTOM_CREST_KIT_TYPE = "1"
AUTHENTIC_CREST_KIT_TYPE = "0"


def _positive_int(value: str | int | None) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number > 0 else None


def _crest(asset_id: str | int) -> str:
    return f"{CREST_BASE_URL}{asset_id}.png"


def crest_url_for_favorite(
    selected_kit_type: str | None,
    crest_asset_id: str | None,
    team_id: int | str | None,
) -> str:
    if selected_kit_type == CUSTOM_CREST_KIT_TYPE and crest_asset_id:
        return _crest(crest_asset_id)
    if selected_kit_type == AUTHENTIC_CREST_KIT_TYPE and _positive_int(team_id):
        return _crest(_positive_int(team_id))
    # Older records only carry the crest asset id.
    if crest_asset_id:
        return _crest(crest_asset_id)
    return PLACEHOLDER_IMAGE_URL


def crest_url_from_kit(custom_kit: CustomKit | None, team_id: int | str | None = None) -> str:
    if custom_kit is None:
        return PLACEHOLDER_IMAGE_URL
    return crest_url_for_favorite(custom_kit.selected_kit_type, custom_kit.crest_asset_id, team_id)


def club_crest_url(club_info: ClubInfo | None) -> str:
    if club_info is None:
        return PLACEHOLDER_IMAGE_URL
    return crest_url_from_kit(club_info.custom_kit, club_info.team_id)


def nationality_flag_url(nationality_id: str | int | None) -> str:
    code = _positive_int(nationality_id)
    if code is None:
        return PLACEHOLDER_IMAGE_URL
    return f"{FLAG_BASE_URL}/{code}.png"


def division_crest_url(division: str | int | None) -> str:
    number = _positive_int(division)
    if number is None:
        return PLACEHOLDER_IMAGE_URL
    return f"{DIVISION_CREST_BASE_URL}{number}.png"


def reputation_tier_url(tier: str | int | None) -> str:
    number = _positive_int(tier)
    if number is None:
        return PLACEHOLDER_IMAGE_URL
    return f"{REPUTATION_TIER_BASE_URL}{number}.png"


def is_allowed_image_url(url: str | None) -> bool:
    """Remote image loading is limited to the vendor's online-assets prefix."""
    if not url:
        return False
    parts = urlsplit(url)
    return parts.scheme == "https" and parts.hostname == ASSET_HOST and parts.path.startswith(ASSET_PATH_PREFIX)
