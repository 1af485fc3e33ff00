from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import FileResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from config_loader import AppConfig
from size_calculator import aggregate
from size_catalog import SizeCatalog
from steam_api import (
    NotResolved,
    PrivateProfile,
    ResolvePayload,
    SteamApiClient,
    SteamApiError,
    parse_identifier,
)


STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = logging.getLogger(__name__)


def _error_status(exc: SteamApiError) -> int:
    if isinstance(exc, PrivateProfile):
        return 400
    if isinstance(exc, NotResolved):
        return 404
    return 500


def create_app(
    config: AppConfig,
    catalog: SizeCatalog,
    client_factory: Optional[Callable[[], SteamApiClient]] = None,
) -> FastAPI:
    if client_factory is None:

        def client_factory() -> SteamApiClient:
            return SteamApiClient(api_key=config.steam.api_key)

    app = FastAPI(title="Steam Library Size Calculator")
    # 启动后只读，请求处理过程中不修改
    app.state.catalog = catalog

    @app.exception_handler(SteamApiError)
    def handle_steam_error(request: Request, exc: SteamApiError) -> PlainTextResponse:
        status = _error_status(exc)
        logger.warning(f"{request.url.path} 返回 {status}: {exc}")
        return PlainTextResponse(str(exc), status_code=status)

    @app.get("/")
    def index() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html", media_type="text/html; charset=utf-8")

    @app.get("/api/resolve")
    def resolve(
        user_input: str = Query(..., alias="id", description="SteamID64、vanity 名称或个人主页链接"),
    ):
        try:
            steamid, vanity = parse_identifier(user_input)
        except ValueError as exc:
            return PlainTextResponse(str(exc), status_code=400)
        if steamid is not None:
            return ResolvePayload(success=1, steamid=steamid).to_dict()

        with client_factory() as client:
            payload = client.fetch_resolve_payload(vanity)
        return payload.to_dict()

    @app.get("/api/games")
    def games(steamid: str = Query(..., alias="id", description="64 位 steamid")) -> dict:
        with client_factory() as client:
            payload = client.fetch_owned_games_payload(steamid)
        return payload.to_dict()

    @app.get("/api/calculate-size")
    def calculate_size(steamid: str = Query(..., alias="id", description="64 位 steamid")) -> dict:
        logger.info(f"正在计算 Steam ID {steamid} 的库大小")
        with client_factory() as client:
            owned = client.get_owned_games(steamid)
        result = aggregate(owned, app.state.catalog)
        logger.info(
            f"返回结果: {len(result.games)} 个有大小的游戏，共 {result.total_games} 个游戏"
        )
        return result.to_dict()

    @app.get("/api/catalog")
    def catalog_info() -> dict:
        return {"entries": len(app.state.catalog)}

    app.mount("/css", StaticFiles(directory=STATIC_DIR / "css"), name="css")
    app.mount("/js", StaticFiles(directory=STATIC_DIR / "js"), name="js")

    return app
