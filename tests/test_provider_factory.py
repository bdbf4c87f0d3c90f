from __future__ import annotations

import pytest

from proclubs.config.settings import normalize_client_mode
from proclubs.providers.ea_clubs import ClubsApiClient
from proclubs.providers.factory import get_clubs_client


def test_clients_factory_defaults_to_proxy(monkeypatch):
    monkeypatch.delenv("EA_CLIENT_MODE", raising=False)
    monkeypatch.setenv("PROCLUBS_PROXY_URL", "https://proxy.example.com/")

    client = get_clubs_client()

    assert isinstance(client, ClubsApiClient)
    assert client.direct is False
    assert client.base_url == "https://proxy.example.com"


def test_clients_factory_accepts_legacy_proxy_variable(monkeypatch):
    monkeypatch.delenv("EA_CLIENT_MODE", raising=False)
    monkeypatch.delenv("PROCLUBS_PROXY_URL", raising=False)
    monkeypatch.setenv("EA_PROXY_URL", "https://legacy-proxy.example.com")

    assert get_clubs_client().base_url == "https://legacy-proxy.example.com"


def test_clients_factory_returns_direct_client(monkeypatch):
    monkeypatch.setenv("EA_CLIENT_MODE", "vendor")
    monkeypatch.delenv("EA_API_BASE_URL", raising=False)

    client = get_clubs_client()

    assert client.direct is True
    assert client.base_url == "https://proclubs.ea.com/api/fc"
    assert client.client.header_provider is not None


def test_clients_factory_rejects_invalid_mode(monkeypatch):
    monkeypatch.setenv("EA_CLIENT_MODE", "carrier-pigeon")

    with pytest.raises(ValueError, match="Unsupported EA_CLIENT_MODE"):
        get_clubs_client()


def test_clients_factory_rejects_non_positive_timeout(monkeypatch):
    monkeypatch.delenv("EA_CLIENT_MODE", raising=False)
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "0")

    with pytest.raises(RuntimeError, match="HTTP_TIMEOUT_SECONDS"):
        get_clubs_client()


@pytest.mark.parametrize(("raw", "expected"), [("Proxy", "proxy"), (" edge ", "proxy"), ("DIRECT", "direct")])
def test_normalize_client_mode_aliases(raw, expected):
    assert normalize_client_mode(raw) == expected
