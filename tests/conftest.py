from __future__ import annotations

from typing import Any, Callable, Dict, List

import httpx
import pytest

from size_catalog import SizeCatalog, SizeEntry
from steam_api import SteamApiClient


API_KEY = "TESTKEY12345"


class SteamStub:
    """按路径返回预设响应的 httpx.MockTransport，并记录收到的请求。"""

    def __init__(self) -> None:
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def json(self, path_fragment: str, body: Any, status_code: int = 200) -> None:
        self.routes[path_fragment] = lambda request: httpx.Response(status_code, json=body)

    def text(self, path_fragment: str, body: str, status_code: int = 200) -> None:
        self.routes[path_fragment] = lambda request: httpx.Response(status_code, text=body)

    def fail(self, path_fragment: str) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.routes[path_fragment] = _raise

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for fragment, responder in self.routes.items():
            if fragment in request.url.path:
                return responder(request)
        return httpx.Response(404, text="not found")

    def client(self) -> SteamApiClient:
        return SteamApiClient(api_key=API_KEY, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def steam_stub() -> SteamStub:
    return SteamStub()


@pytest.fixture
def catalog() -> SizeCatalog:
    return SizeCatalog(
        {
            "10": SizeEntry(appid="10", name="Game A", size_gb=5.0),
            "30": SizeEntry(appid="30", name="Catalog Name C", size_gb=12.5),
            "40": SizeEntry(appid="40", name="Game D", size_gb=12.5),
        }
    )
