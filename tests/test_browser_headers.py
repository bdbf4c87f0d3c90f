from __future__ import annotations

from proclubs.core.browser_headers import build_browser_headers


def test_browser_headers_are_deterministic():
    assert build_browser_headers() == build_browser_headers()


def test_browser_headers_look_like_a_browser_on_ea_com():
    headers = build_browser_headers()

    assert headers["Referer"] == "https://www.ea.com/"
    assert headers["Origin"] == "https://www.ea.com"
    assert headers["User-Agent"].startswith("Mozilla/5.0")
    assert "Chrome/" in headers["User-Agent"]
    assert headers["Accept"].startswith("application/json")
    assert {"sec-ch-ua", "sec-ch-ua-platform", "Sec-Fetch-Mode"} <= set(headers)


def test_browser_headers_return_independent_copies():
    first = build_browser_headers()
    first["User-Agent"] = "changed"

    assert build_browser_headers()["User-Agent"] != "changed"
