from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import json
import threading

import pytest

from proclubs.core.http_client import HttpTransportError
from proclubs.domain.models import DEFAULT_CUSTOM_KIT, ApiError, ApiErrorKind, ApiSuccess, Platform
from proclubs.providers.ea_clubs import ClubsApiClient


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, *, text: str | None = None, reason: str = "") -> None:
        self.status_code = status_code
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text
        self.content = text.encode("utf-8")
        self.headers: dict[str, str] = {}
        self.reason = reason

    def json(self):
        return json.loads(self.text)


class _SpyHttpClient:
    """Answers by vendor endpoint and records every call."""

    def __init__(self, routes: dict | None = None, default=None) -> None:
        self.routes = routes or {}
        self.default = default
        self.calls: list[dict] = []
        self._lock = threading.Lock()

    def get(self, url, *, params=None, headers=None, timeout=None, cancel_event=None):
        with self._lock:
            self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        params = dict(params or {})
        key = params.get("endpoint") or url.rsplit("/api/fc", 1)[-1]
        route = self.routes.get((key, params.get("matchType")), self.routes.get(key, self.default))
        if callable(route):
            route = route(url, params)
        if isinstance(route, Exception):
            raise route
        return route


def _search_row(club_id: str, name: str, platform: str = "common-gen5") -> dict:
    return {
        "clubId": club_id,
        "clubName": name,
        "platform": platform,
        "wins": "10",
        "currentDivision": "3",
        "clubInfo": {"name": name, "clubId": int(club_id), "teamId": 0},
    }


def _match(match_id: str, timestamp: int) -> dict:
    return {
        "matchId": match_id,
        "timestamp": timestamp,
        "clubs": {"1001": {"goals": "1", "details": {"name": "Alpha FC"}}, "2002": {"goals": "0"}},
        "players": {},
    }


def _proxy_client(spy: _SpyHttpClient) -> ClubsApiClient:
    return ClubsApiClient(client=spy, base_url="https://proxy.example.com/")


OPERATIONS = [
    ("search_clubs", ("Alpha",)),
    ("get_leaderboard", ()),
    ("get_clubs_info", ("1001",)),
    ("get_club_info", ("1001",)),
    ("get_club_overall_stats", ("1001",)),
    ("get_members_stats", ("1001",)),
    ("get_members_career_stats", ("1001",)),
    ("get_club_matches", ("1001", "leagueMatch")),
    ("get_all_club_matches", ("1001",)),
    ("get_playoff_achievements", ("1001",)),
]


@pytest.mark.parametrize(("method", "args"), OPERATIONS)
def test_invalid_platform_is_rejected_without_network(method, args):
    spy = _SpyHttpClient()
    client = _proxy_client(spy)

    result = getattr(client, method)("ps3", *args)

    assert isinstance(result, ApiError)
    assert result.kind is ApiErrorKind.invalid_input
    assert "ps3" in result.message
    assert spy.calls == []


@pytest.mark.parametrize(
    ("method", "args"),
    [
        ("search_clubs", (" a ",)),
        ("search_clubs", ("",)),
        ("get_clubs_info", ([" ", ""],)),
        ("get_members_stats", ("  ",)),
        ("get_club_matches", ("1001", "cupMatch")),
    ],
)
def test_invalid_arguments_are_rejected_without_network(method, args):
    spy = _SpyHttpClient()

    result = getattr(_proxy_client(spy), method)("common-gen5", *args)

    assert isinstance(result, ApiError)
    assert result.kind is ApiErrorKind.invalid_input
    assert spy.calls == []


def test_search_calls_proxy_with_endpoint_and_trimmed_name():
    spy = _SpyHttpClient(default=_FakeResponse(200, [_search_row("1001", "Alpha FC")]))

    result = _proxy_client(spy).search_clubs("common-gen5", "  Alpha FC  ", timeout=4.0)

    assert isinstance(result, ApiSuccess)
    assert spy.calls == [
        {
            "url": "https://proxy.example.com/api/ea",
            "params": {"endpoint": "/allTimeLeaderboard/search", "platform": "common-gen5", "clubName": "Alpha FC"},
            "timeout": 4.0,
        }
    ]


def test_search_keeps_vendor_order_and_defaults_missing_kit():
    payload = [_search_row("2001", "Zeta FC"), _search_row("1001", "Alpha FC")]
    spy = _SpyHttpClient(default=_FakeResponse(200, payload))

    result = _proxy_client(spy).search_clubs(Platform.gen5, "FC")

    assert result.ok is True
    assert result.not_found is False
    assert [club.club_name for club in result.data] == ["Zeta FC", "Alpha FC"]
    assert result.data[0].club_info.custom_kit is DEFAULT_CUSTOM_KIT


def test_search_404_is_not_found():
    spy = _SpyHttpClient(default=_FakeResponse(404, text="Not Found"))

    result = _proxy_client(spy).search_clubs("common-gen5", "Nobody")

    assert result == ApiSuccess(data=(), not_found=True)


def test_search_empty_list_is_not_found():
    spy = _SpyHttpClient(default=_FakeResponse(200, []))

    result = _proxy_client(spy).search_clubs("common-gen5", "Nobody")

    assert result == ApiSuccess(data=(), not_found=True)


def test_proxy_error_body_becomes_vendor_error():
    body = {"error": "EA API error: 503 Service Unavailable", "details": "<html>maintenance</html>"}
    spy = _SpyHttpClient(default=_FakeResponse(503, body))

    result = _proxy_client(spy).get_club_overall_stats("common-gen5", "1001")

    assert isinstance(result, ApiError)
    assert result.kind is ApiErrorKind.vendor_error
    assert result.status == 503
    assert result.message == "EA API error: 503 Service Unavailable"
    assert result.details == "<html>maintenance</html>"


def test_non_json_error_body_is_truncated_into_details():
    spy = _SpyHttpClient(default=_FakeResponse(502, text="x" * 900))

    result = _proxy_client(spy).get_leaderboard("nx")

    assert result.kind is ApiErrorKind.vendor_error
    assert result.status == 502
    assert result.details == "x" * 500


def test_429_is_rate_limited():
    spy = _SpyHttpClient(default=_FakeResponse(429, {"error": "Too Many Requests"}))

    result = _proxy_client(spy).get_members_stats("common-gen4", "1001")

    assert result.kind is ApiErrorKind.rate_limited
    assert result.status == 429


def test_transport_failure_is_transport_error():
    spy = _SpyHttpClient(default=HttpTransportError("HTTP GET network failure"))

    result = _proxy_client(spy).get_playoff_achievements("common-gen5", "1001")

    assert result.kind is ApiErrorKind.transport_error
    assert "network failure" in result.message


def test_malformed_payload_is_parse_error():
    spy = _SpyHttpClient(default=_FakeResponse(200, text="{not json"))

    result = _proxy_client(spy).get_leaderboard("common-gen5")

    assert result.kind is ApiErrorKind.parse_error


def test_wrong_shape_is_parse_error():
    spy = _SpyHttpClient(default=_FakeResponse(200, {"members": "nobody"}))

    result = _proxy_client(spy).get_members_stats("common-gen5", "1001")

    assert result.kind is ApiErrorKind.parse_error


def test_null_body_is_not_found():
    spy = _SpyHttpClient(default=_FakeResponse(200, text="null"))

    result = _proxy_client(spy).get_members_career_stats("common-gen5", "1001")

    assert result.ok is True
    assert result.not_found is True
    assert result.data.members == ()


def test_members_without_rows_are_not_found():
    spy = _SpyHttpClient(default=_FakeResponse(200, {"members": [], "positionCount": {}}))

    result = _proxy_client(spy).get_members_stats("common-gen5", "1001")

    assert result.not_found is True
    assert result.data.club_id == "1001"


def test_club_info_found_and_missing():
    payload = {"1001": {"name": "Alpha FC", "clubId": 1001, "customKit": {"crestAssetId": "55", "selectedKitType": "1"}}}
    spy = _SpyHttpClient(default=_FakeResponse(200, payload))
    client = _proxy_client(spy)

    found = client.get_club_info("common-gen5", "1001")
    missing = client.get_club_info("common-gen5", "9999")

    assert found.data.name == "Alpha FC"
    assert found.data.custom_kit.crest_asset_id == "55"
    assert missing == ApiSuccess(data=None, not_found=True)
    assert spy.calls[0]["params"]["clubIds"] == "1001"


def test_clubs_info_joins_club_ids():
    spy = _SpyHttpClient(default=_FakeResponse(200, {}))

    result = _proxy_client(spy).get_clubs_info("common-gen5", ["1001", " 2002 "])

    assert spy.calls[0]["params"]["clubIds"] == "1001,2002"
    assert result.not_found is True


def test_repeated_calls_return_equal_results():
    spy = _SpyHttpClient(default=_FakeResponse(200, [_search_row("1001", "Alpha FC")]))
    client = _proxy_client(spy)

    assert client.search_clubs("common-gen5", "Alpha") == client.search_clubs("common-gen5", "Alpha")


def test_concurrent_calls_do_not_share_state():
    def by_platform(url, params):
        platform = params["platform"]
        return _FakeResponse(200, [_search_row("1001", f"Club on {platform}", platform)])

    spy = _SpyHttpClient(default=by_platform)
    client = _proxy_client(spy)
    platforms = ["common-gen5", "common-gen4", "nx"] * 4

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(lambda platform: client.search_clubs(platform, "Club"), platforms))

    for platform, result in zip(platforms, results):
        assert result.data[0].platform.value == platform
        assert result.data[0].club_name == f"Club on {platform}"


def test_all_club_matches_merges_categories_newest_first():
    spy = _SpyHttpClient(
        routes={
            ("/clubs/matches", "leagueMatch"): _FakeResponse(200, [_match("league-1", 100)]),
            ("/clubs/matches", "playoffMatch"): _FakeResponse(503, {"error": "EA API error: 503"}),
            ("/clubs/matches", "friendlyMatch"): _FakeResponse(200, [_match("friendly-1", 300)]),
        }
    )

    result = _proxy_client(spy).get_all_club_matches("common-gen5", "1001")

    assert isinstance(result, ApiSuccess)
    assert [match.match_id for match in result.data] == ["friendly-1", "league-1"]
    assert {call["params"]["matchType"] for call in spy.calls} == {"leagueMatch", "playoffMatch", "friendlyMatch"}


def test_all_club_matches_returns_error_when_every_category_fails():
    spy = _SpyHttpClient(default=_FakeResponse(503, {"error": "EA API error: 503"}))

    result = _proxy_client(spy).get_all_club_matches("common-gen5", "1001")

    assert isinstance(result, ApiError)
    assert result.kind is ApiErrorKind.vendor_error


def test_direct_mode_calls_vendor_without_endpoint_parameter():
    spy = _SpyHttpClient(default=_FakeResponse(200, []))
    client = ClubsApiClient(client=spy, base_url="https://proclubs.ea.com/api/fc", direct=True)

    result = client.get_leaderboard("common-gen5")

    assert spy.calls[0]["url"] == "https://proclubs.ea.com/api/fc/allTimeLeaderboard"
    assert spy.calls[0]["params"] == {"platform": "common-gen5"}
    assert result == ApiSuccess(data=(), not_found=True)


@pytest.mark.parametrize(
    ("method", "args"),
    [
        ("get_clubs_info", ("1001",)),
        ("get_club_info", ("1001",)),
        ("get_members_stats", ("1001",)),
        ("get_members_career_stats", ("1001",)),
    ],
)
def test_empty_list_for_object_endpoints_is_not_found(method, args):
    spy = _SpyHttpClient(default=_FakeResponse(200, []))

    result = getattr(_proxy_client(spy), method)("common-gen5", *args)

    assert isinstance(result, ApiSuccess)
    assert result.not_found is True


def test_empty_list_keeps_typed_empty_roster():
    spy = _SpyHttpClient(default=_FakeResponse(200, []))

    result = _proxy_client(spy).get_members_career_stats("common-gen5", "1001")

    assert result.data.members == ()
    assert result.data.club_id == "1001"


@pytest.mark.parametrize(
    "method",
    ["get_club_info", "get_members_stats", "get_members_career_stats", "get_playoff_achievements"],
)
def test_single_club_operations_reject_id_lists(method):
    spy = _SpyHttpClient(default=_FakeResponse(200, {}))

    result = getattr(_proxy_client(spy), method)("common-gen5", "1001,2002")

    assert isinstance(result, ApiError)
    assert result.kind is ApiErrorKind.invalid_input
    assert "single club id" in result.message
    assert spy.calls == []
