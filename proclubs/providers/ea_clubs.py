from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import functools
import logging
import threading
from typing import Any, Callable, Iterable, Mapping, TypeVar

import requests

from proclubs.config.settings import settings
from proclubs.core.browser_headers import build_browser_headers
from proclubs.core.http_client import HttpClient, HttpTransportError
from proclubs.domain.models import (
    ApiError,
    ApiErrorKind,
    ApiResult,
    ApiSuccess,
    ClubInfo,
    ClubOverallStats,
    ClubRoster,
    ClubSearchResult,
    Match,
    MatchType,
    MemberCareerStats,
    MemberStats,
    Platform,
    PlayoffAchievement,
    parse_match_type,
    parse_platform,
)
from proclubs.mappers.clubs_mapper import (
    build_club_search_results,
    build_clubs_info,
    build_clubs_overall_stats,
    build_playoff_achievements,
)
from proclubs.mappers.matches_mapper import build_matches, merge_matches
from proclubs.mappers.members_mapper import build_members_career_roster, build_members_stats_roster


T = TypeVar("T")

PROXY_PATH = "/api/ea"
ERROR_DETAILS_LIMIT = 500
MIN_CLUB_NAME_LENGTH = 2

SEARCH_ENDPOINT = "/allTimeLeaderboard/search"
LEADERBOARD_ENDPOINT = "/allTimeLeaderboard"
CLUBS_INFO_ENDPOINT = "/clubs/info"
OVERALL_STATS_ENDPOINT = "/clubs/overallStats"
MEMBERS_STATS_ENDPOINT = "/members/stats"
MEMBERS_CAREER_ENDPOINT = "/members/career/stats"
MATCHES_ENDPOINT = "/clubs/matches"
PLAYOFF_ACHIEVEMENTS_ENDPOINT = "/club/playoffAchievements"

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    pass


def _returns_api_result(method: Callable[..., ApiResult]) -> Callable[..., ApiResult]:
    @functools.wraps(method)
    def wrapper(*args: Any, **kwargs: Any) -> ApiResult:
        try:
            return method(*args, **kwargs)
        except InvalidInputError as exc:
            return ApiError(kind=ApiErrorKind.invalid_input, message=str(exc))

    return wrapper


def _require_platform(platform: str | Platform | None) -> Platform:
    resolved = parse_platform(platform)
    if resolved is None:
        supported = ", ".join(item.value for item in Platform)
        raise InvalidInputError(f"Invalid platform '{platform}'. Supported values: {supported}")
    return resolved


def _require_text(value: str | None, *, field: str, min_length: int = 1) -> str:
    cleaned = value.strip() if isinstance(value, str) else ""
    if not cleaned:
        raise InvalidInputError(f"{field} is required")
    if len(cleaned) < min_length:
        raise InvalidInputError(f"{field} must have at least {min_length} characters")
    return cleaned


def _require_club_ids(club_ids: str | Iterable[str] | None) -> str:
    if isinstance(club_ids, str):
        parts = club_ids.split(",")
    elif club_ids is None:
        parts = []
    else:
        parts = [str(part) for part in club_ids]
    cleaned = [part.strip() for part in parts if part and part.strip()]
    if not cleaned:
        raise InvalidInputError("Club id is required")
    return ",".join(cleaned)


def _require_club_id(club_id: str | None) -> str:
    cleaned = _require_text(club_id, field="Club id")
    if "," in cleaned:
        raise InvalidInputError(f"Expected a single club id, got '{cleaned}'")
    return cleaned


def _require_match_type(match_type: str | MatchType | None) -> MatchType:
    resolved = parse_match_type(match_type)
    if resolved is None:
        supported = ", ".join(item.value for item in MatchType)
        raise InvalidInputError(f"Invalid match type '{match_type}'. Supported values: {supported}")
    return resolved


def _error_from_response(kind: ApiErrorKind, response: requests.Response) -> ApiError:
    status = response.status_code
    message = f"Vendor request failed with status {status}"
    details: str | None = (response.text or "")[:ERROR_DETAILS_LIMIT] or None
    try:
        body = response.json()
    except ValueError:
        body = None
    # The edge proxy wraps vendor failures as {"error", "details"}.
    if isinstance(body, dict):
        if body.get("error"):
            message = str(body["error"])
        if "details" in body:
            details = None if body["details"] is None else str(body["details"])[:ERROR_DETAILS_LIMIT]
    return ApiError(kind=kind, message=message, status=status, details=details)


def _is_blank(data: Any) -> bool:
    return not data


class ClubsApiClient:
    """Typed access to the Pro Clubs statistics API.

    Requests go through the edge proxy (``GET /api/ea``) unless ``direct`` is
    set, in which case the vendor is called straight away with the browser
    header set. Every public method returns an ``ApiResult`` and never raises.
    """

    def __init__(
        self,
        *,
        client: HttpClient | None = None,
        base_url: str | None = None,
        direct: bool = False,
    ) -> None:
        self.direct = direct
        if direct:
            self.base_url = (base_url or settings.EA_API_BASE_URL).rstrip("/")
            self.client = client or HttpClient(header_provider=build_browser_headers)
        else:
            self.base_url = (base_url or settings.PROCLUBS_PROXY_URL).rstrip("/")
            self.client = client or HttpClient()

    def _request(
        self,
        *,
        endpoint: str,
        params: dict[str, str],
        decode: Callable[[Any], T],
        empty: T,
        is_empty: Callable[[T], bool] = _is_blank,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[T]:
        if self.direct:
            url = f"{self.base_url}{endpoint}"
            query: dict[str, str] = dict(params)
        else:
            url = f"{self.base_url}{PROXY_PATH}"
            query = {"endpoint": endpoint, **params}

        try:
            response = self.client.get(url, params=query, timeout=timeout, cancel_event=cancel_event)
        except HttpTransportError as exc:
            logger.warning("transport_error endpoint=%s platform=%s error=%s", endpoint, params.get("platform"), exc)
            return ApiError(kind=ApiErrorKind.transport_error, message=str(exc))

        status = response.status_code
        # The vendor answers 404 for unknown clubs and for some malformed queries alike; both read as not found.
        if status == 404:
            return ApiSuccess(data=empty, not_found=True)
        if status == 429:
            return _error_from_response(ApiErrorKind.rate_limited, response)
        if not 200 <= status < 300:
            return _error_from_response(ApiErrorKind.vendor_error, response)

        try:
            payload = response.json() if (response.content or b"").strip() else None
            # Absent, null and empty bodies ([] or {}) all mean nothing is on record.
            if not payload:
                return ApiSuccess(data=empty, not_found=True)
            data = decode(payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning("parse_error endpoint=%s platform=%s error=%s", endpoint, params.get("platform"), exc)
            return ApiError(
                kind=ApiErrorKind.parse_error,
                message=f"Could not decode {endpoint} response: {exc}",
                status=status,
            )
        if is_empty(data):
            return ApiSuccess(data=empty, not_found=True)
        return ApiSuccess(data=data)

    @_returns_api_result
    def search_clubs(
        self,
        platform: str | Platform,
        club_name: str,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[tuple[ClubSearchResult, ...]]:
        resolved = _require_platform(platform)
        name = _require_text(club_name, field="Club name", min_length=MIN_CLUB_NAME_LENGTH)
        return self._request(
            endpoint=SEARCH_ENDPOINT,
            params={"platform": resolved.value, "clubName": name},
            decode=lambda payload: build_club_search_results(payload, platform=resolved),
            empty=(),
            timeout=timeout,
            cancel_event=cancel_event,
        )

    @_returns_api_result
    def get_leaderboard(
        self,
        platform: str | Platform,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[tuple[ClubSearchResult, ...]]:
        resolved = _require_platform(platform)
        return self._request(
            endpoint=LEADERBOARD_ENDPOINT,
            params={"platform": resolved.value},
            decode=lambda payload: build_club_search_results(payload, platform=resolved),
            empty=(),
            timeout=timeout,
            cancel_event=cancel_event,
        )

    @_returns_api_result
    def get_clubs_info(
        self,
        platform: str | Platform,
        club_ids: str | Iterable[str],
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[Mapping[str, ClubInfo]]:
        resolved = _require_platform(platform)
        ids = _require_club_ids(club_ids)
        return self._request(
            endpoint=CLUBS_INFO_ENDPOINT,
            params={"platform": resolved.value, "clubIds": ids},
            decode=lambda payload: build_clubs_info(payload, platform=resolved),
            empty=build_clubs_info(None, platform=resolved),
            timeout=timeout,
            cancel_event=cancel_event,
        )

    @_returns_api_result
    def get_club_info(
        self,
        platform: str | Platform,
        club_id: str,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[ClubInfo | None]:
        club_id = _require_club_id(club_id)
        result = self.get_clubs_info(platform, club_id, timeout=timeout, cancel_event=cancel_event)
        if isinstance(result, ApiError):
            return result
        info = result.data.get(club_id)
        if info is None:
            return ApiSuccess(data=None, not_found=True)
        return ApiSuccess(data=info)

    @_returns_api_result
    def get_club_overall_stats(
        self,
        platform: str | Platform,
        club_ids: str | Iterable[str],
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[tuple[ClubOverallStats, ...]]:
        resolved = _require_platform(platform)
        ids = _require_club_ids(club_ids)
        return self._request(
            endpoint=OVERALL_STATS_ENDPOINT,
            params={"platform": resolved.value, "clubIds": ids},
            decode=lambda payload: build_clubs_overall_stats(payload, platform=resolved),
            empty=(),
            timeout=timeout,
            cancel_event=cancel_event,
        )

    @_returns_api_result
    def get_members_stats(
        self,
        platform: str | Platform,
        club_id: str,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[ClubRoster[MemberStats]]:
        resolved = _require_platform(platform)
        club_id = _require_club_id(club_id)
        return self._request(
            endpoint=MEMBERS_STATS_ENDPOINT,
            params={"platform": resolved.value, "clubId": club_id},
            decode=lambda payload: build_members_stats_roster(payload, club_id=club_id, platform=resolved),
            empty=ClubRoster(club_id=club_id, platform=resolved),
            is_empty=lambda roster: not roster.members,
            timeout=timeout,
            cancel_event=cancel_event,
        )

    @_returns_api_result
    def get_members_career_stats(
        self,
        platform: str | Platform,
        club_id: str,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[ClubRoster[MemberCareerStats]]:
        resolved = _require_platform(platform)
        club_id = _require_club_id(club_id)
        return self._request(
            endpoint=MEMBERS_CAREER_ENDPOINT,
            params={"platform": resolved.value, "clubId": club_id},
            decode=lambda payload: build_members_career_roster(payload, club_id=club_id, platform=resolved),
            empty=ClubRoster(club_id=club_id, platform=resolved),
            is_empty=lambda roster: not roster.members,
            timeout=timeout,
            cancel_event=cancel_event,
        )

    @_returns_api_result
    def get_club_matches(
        self,
        platform: str | Platform,
        club_ids: str | Iterable[str],
        match_type: str | MatchType,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[tuple[Match, ...]]:
        resolved = _require_platform(platform)
        ids = _require_club_ids(club_ids)
        resolved_type = _require_match_type(match_type)
        return self._request(
            endpoint=MATCHES_ENDPOINT,
            params={"platform": resolved.value, "clubIds": ids, "matchType": resolved_type.value},
            decode=lambda payload: build_matches(payload, platform=resolved, match_type=resolved_type),
            empty=(),
            timeout=timeout,
            cancel_event=cancel_event,
        )

    @_returns_api_result
    def get_all_club_matches(
        self,
        platform: str | Platform,
        club_ids: str | Iterable[str],
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[tuple[Match, ...]]:
        """League, playoff and friendly matches fetched concurrently, newest first.

        A category that fails contributes nothing; the first error is returned
        only when every category failed.
        """
        resolved = _require_platform(platform)
        ids = _require_club_ids(club_ids)
        match_types = list(MatchType)
        with ThreadPoolExecutor(max_workers=len(match_types)) as pool:
            futures = [
                pool.submit(
                    self.get_club_matches,
                    resolved,
                    ids,
                    match_type,
                    timeout=timeout,
                    cancel_event=cancel_event,
                )
                for match_type in match_types
            ]
            results = [future.result() for future in futures]

        successes = [result for result in results if isinstance(result, ApiSuccess)]
        if not successes:
            return results[0]
        for match_type, result in zip(match_types, results):
            if isinstance(result, ApiError):
                logger.warning(
                    "match_category_failed platform=%s club_ids=%s match_type=%s kind=%s",
                    resolved.value,
                    ids,
                    match_type.value,
                    result.kind.value,
                )
        merged = merge_matches(result.data for result in successes)
        return ApiSuccess(data=merged, not_found=not merged)

    @_returns_api_result
    def get_playoff_achievements(
        self,
        platform: str | Platform,
        club_id: str,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ApiResult[tuple[PlayoffAchievement, ...]]:
        resolved = _require_platform(platform)
        club_id = _require_club_id(club_id)
        return self._request(
            endpoint=PLAYOFF_ACHIEVEMENTS_ENDPOINT,
            params={"platform": resolved.value, "clubId": club_id},
            decode=build_playoff_achievements,
            empty=(),
            timeout=timeout,
            cancel_event=cancel_event,
        )
