"""Tests for the HTTP endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from config_loader import AppConfig, CatalogConfig, ServerConfig, SteamConfig
from size_api import create_app
from size_catalog import SizeCatalog
from tests.conftest import API_KEY, SteamStub


STEAMID = "76561197960287930"


@pytest.fixture
def api(steam_stub: SteamStub, catalog: SizeCatalog) -> TestClient:
    config = AppConfig(
        steam=SteamConfig(api_key=API_KEY),
        server=ServerConfig(),
        catalog=CatalogConfig(paths=[]),
    )
    app = create_app(config, catalog, client_factory=steam_stub.client)
    return TestClient(app)


class TestResolveEndpoint:
    def test_proxies_vanity(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.json("ResolveVanityURL", {"response": {"success": 1, "steamid": STEAMID}})

        resp = api.get("/api/resolve", params={"id": "gaben"})

        assert resp.status_code == 200
        assert resp.json() == {"response": {"success": 1, "steamid": STEAMID}}

    def test_no_match_still_returns_payload(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.json("ResolveVanityURL", {"response": {"success": 42, "message": "No match"}})

        resp = api.get("/api/resolve", params={"id": "nobody"})

        assert resp.status_code == 200
        assert resp.json() == {"response": {"success": 42, "steamid": None}}

    def test_steamid_is_answered_locally(self, api: TestClient, steam_stub: SteamStub) -> None:
        resp = api.get("/api/resolve", params={"id": f"https://steamcommunity.com/profiles/{STEAMID}"})

        assert resp.status_code == 200
        assert resp.json() == {"response": {"success": 1, "steamid": STEAMID}}
        assert steam_stub.requests == []

    def test_transport_failure_is_500(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.fail("ResolveVanityURL")

        resp = api.get("/api/resolve", params={"id": "gaben"})

        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("text/plain")
        assert "Failed to contact Steam API" in resp.text

    def test_malformed_response_is_500(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.text("ResolveVanityURL", "not json")

        resp = api.get("/api/resolve", params={"id": "gaben"})

        assert resp.status_code == 500
        assert "Failed to parse Steam API response" in resp.text

    def test_blank_id_is_400(self, api: TestClient) -> None:
        assert api.get("/api/resolve", params={"id": "  "}).status_code == 400

    def test_missing_id_is_rejected(self, api: TestClient) -> None:
        assert api.get("/api/resolve").status_code == 422


class TestGamesEndpoint:
    def test_returns_payload(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.json(
            "GetOwnedGames",
            {"response": {"game_count": 1, "games": [{"appid": 10, "name": "Game A", "playtime_forever": 5}]}},
        )

        resp = api.get("/api/games", params={"id": STEAMID})

        assert resp.status_code == 200
        assert resp.json() == {
            "response": {
                "game_count": 1,
                "games": [{"appid": 10, "name": "Game A", "playtime_forever": 5}],
            }
        }

    def test_private_profile_payload_is_passed_through(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.json("GetOwnedGames", {"response": {}})

        resp = api.get("/api/games", params={"id": STEAMID})

        assert resp.status_code == 200
        assert resp.json() == {"response": {"game_count": None, "games": None}}

    def test_transport_failure_is_500(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.text("GetOwnedGames", "boom", status_code=502)

        assert api.get("/api/games", params={"id": STEAMID}).status_code == 500


class TestCalculateSizeEndpoint:
    def test_aggregates_library(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.json(
            "GetOwnedGames",
            {
                "response": {
                    "game_count": 4,
                    "games": [
                        {"appid": 10, "name": "Game A"},
                        {"appid": 20, "name": "Game B"},
                        {"appid": 30},
                        {"appid": 40, "name": "Game D"},
                    ],
                }
            },
        )

        resp = api.get("/api/calculate-size", params={"id": STEAMID})

        assert resp.status_code == 200
        assert resp.json() == {
            "total_size_gb": 30.0,
            "total_size_display": "30.00 GB",
            "total_games": 4,
            "games": [
                {"name": "Catalog Name C", "size": 12.5},
                {"name": "Game D", "size": 12.5},
                {"name": "Game A", "size": 5.0},
            ],
        }

    def test_empty_library(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.json("GetOwnedGames", {"response": {"game_count": 0, "games": []}})

        resp = api.get("/api/calculate-size", params={"id": STEAMID})

        assert resp.status_code == 200
        assert resp.json() == {
            "total_size_gb": 0.0,
            "total_size_display": "0.00 GB",
            "total_games": 0,
            "games": [],
        }

    def test_private_profile_is_400(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.json("GetOwnedGames", {"response": {}})

        resp = api.get("/api/calculate-size", params={"id": STEAMID})

        assert resp.status_code == 400
        assert "profile might be private" in resp.text

    def test_transport_failure_is_500(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.fail("GetOwnedGames")

        resp = api.get("/api/calculate-size", params={"id": STEAMID})

        assert resp.status_code == 500
        assert "Failed to contact Steam API" in resp.text

    def test_malformed_response_is_500(self, api: TestClient, steam_stub: SteamStub) -> None:
        steam_stub.json("GetOwnedGames", {"response": {"games": [{"appid": "oops"}]}})

        assert api.get("/api/calculate-size", params={"id": STEAMID}).status_code == 500


class TestStaticAndInfo:
    def test_index_page(self, api: TestClient) -> None:
        resp = api.get("/")

        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]

    def test_assets(self, api: TestClient) -> None:
        assert api.get("/js/app.js").status_code == 200
        assert api.get("/css/style.css").status_code == 200

    def test_catalog_info(self, api: TestClient) -> None:
        assert api.get("/api/catalog").json() == {"entries": 3}
