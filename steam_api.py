from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx


STEAM_API_BASE = "https://api.steampowered.com"

logger = logging.getLogger(__name__)

_PROFILE_URL_RE = re.compile(r"steamcommunity\.com/(id|profiles)/([^/?#]+)/?")
_STEAMID64_RE = re.compile(r"\d{17}")


class SteamApiError(Exception):
    """Steam Web API 调用失败的基类。"""


class TransportError(SteamApiError):
    """无法连接 Steam API，或返回了非 2xx 状态码。"""


class MalformedResponse(SteamApiError):
    """响应体无法解析成预期结构。"""


class NotResolved(SteamApiError):
    """vanity 名称没有对应的 steamid。"""


class PrivateProfile(SteamApiError):
    """响应中没有 games 字段，通常说明资料为私密。"""


@dataclass
class OwnedGame:
    appid: int
    name: Optional[str]
    playtime_forever: Optional[int]


@dataclass
class ResolvePayload:
    success: int
    steamid: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"response": {"success": self.success, "steamid": self.steamid}}


@dataclass
class OwnedGamesPayload:
    game_count: Optional[int]
    games: Optional[List[OwnedGame]]

    def to_dict(self) -> Dict[str, Any]:
        games = None
        if self.games is not None:
            games = [
                {
                    "appid": g.appid,
                    "name": g.name,
                    "playtime_forever": g.playtime_forever,
                }
                for g in self.games
            ]
        return {"response": {"game_count": self.game_count, "games": games}}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_resolve(data: Any) -> ResolvePayload:
    if not isinstance(data, dict) or not isinstance(data.get("response"), dict):
        raise MalformedResponse("响应中缺少 response 对象")
    response = data["response"]
    success = response.get("success")
    if not _is_int(success):
        raise MalformedResponse(f"success 字段无效: {success!r}")
    steamid = response.get("steamid")
    if steamid is not None and not isinstance(steamid, str):
        raise MalformedResponse(f"steamid 字段无效: {steamid!r}")
    return ResolvePayload(success=success, steamid=steamid)


def _parse_owned_games(data: Any) -> OwnedGamesPayload:
    if not isinstance(data, dict) or not isinstance(data.get("response"), dict):
        raise MalformedResponse("响应中缺少 response 对象")
    response = data["response"]

    game_count = response.get("game_count")
    if game_count is not None and not _is_int(game_count):
        raise MalformedResponse(f"game_count 字段无效: {game_count!r}")

    games_raw = response.get("games")
    if games_raw is None:
        return OwnedGamesPayload(game_count=game_count, games=None)
    if not isinstance(games_raw, list):
        raise MalformedResponse("games 字段不是列表")

    games: List[OwnedGame] = []
    for g in games_raw:
        if not isinstance(g, dict):
            raise MalformedResponse(f"游戏条目不是对象: {g!r}")
        appid = g.get("appid")
        if not _is_int(appid):
            raise MalformedResponse(f"appid 字段无效: {appid!r}")
        name = g.get("name")
        if name is not None and not isinstance(name, str):
            raise MalformedResponse(f"appid {appid} 的 name 字段无效")
        playtime = g.get("playtime_forever")
        if playtime is not None and not _is_int(playtime):
            raise MalformedResponse(f"appid {appid} 的 playtime_forever 字段无效")
        games.append(OwnedGame(appid=appid, name=name, playtime_forever=playtime))
    return OwnedGamesPayload(game_count=game_count, games=games)


class SteamApiClient:
    def __init__(
        self,
        api_key: str,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._client = httpx.Client(transport=transport)

    def _get_json(self, url: str, params: Dict[str, Any], label: str) -> Any:
        try:
            resp = self._client.get(url, params=params)
            logger.info(f"Steam API ({label}) 返回状态码 {resp.status_code}")
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(f"请求 Steam API ({label}) 失败: {exc}")
            raise TransportError(f"Failed to contact Steam API: {exc}") from exc
        try:
            return resp.json()
        except ValueError as exc:
            logger.error(f"解析 Steam API ({label}) 响应失败: {exc}")
            raise MalformedResponse(f"Failed to parse Steam API response: {exc}") from exc

    def fetch_resolve_payload(self, vanity_url: str) -> ResolvePayload:
        params = {
            "key": self._api_key,
            "vanityurl": vanity_url,
        }
        url = f"{STEAM_API_BASE}/ISteamUser/ResolveVanityURL/v0001/"
        logger.info(f"正在解析 vanity URL: {vanity_url}")
        data = self._get_json(url, params, "resolve")
        try:
            payload = _parse_resolve(data)
        except MalformedResponse as exc:
            logger.error(f"解析 resolve 响应失败: {exc}")
            raise MalformedResponse(f"Failed to parse Steam API response: {exc}") from exc
        logger.info(f"resolve 响应解析成功: success={payload.success}")
        return payload

    def resolve_vanity_url(self, vanity_url: str) -> str:
        payload = self.fetch_resolve_payload(vanity_url)
        if payload.success != 1 or not payload.steamid:
            raise NotResolved(f"无法通过 vanity_url={vanity_url} 解析 steamid")
        return payload.steamid

    def fetch_owned_games_payload(self, steamid: str) -> OwnedGamesPayload:
        params = {
            "key": self._api_key,
            "steamid": steamid,
            "format": "json",
            "include_appinfo": "true",
        }
        url = f"{STEAM_API_BASE}/IPlayerService/GetOwnedGames/v0001/"
        logger.info(f"正在获取 Steam ID {steamid} 的游戏列表")
        data = self._get_json(url, params, "games")
        try:
            payload = _parse_owned_games(data)
        except MalformedResponse as exc:
            logger.error(f"解析 games 响应失败: {exc}")
            raise MalformedResponse(f"Failed to parse Steam API response: {exc}") from exc
        logger.info(f"games 响应解析成功: {payload.game_count or 0} 个游戏")
        return payload

    def get_owned_games(self, steamid: str) -> List[OwnedGame]:
        payload = self.fetch_owned_games_payload(steamid)
        if payload.games is None:
            # games 字段缺失与空列表不同，Steam 用它表示私密资料
            logger.warning(f"Steam ID {steamid} 的响应中没有 games 字段，资料可能为私密")
            raise PrivateProfile(
                "Could not retrieve games list - profile might be private"
            )
        logger.info(f"Steam ID {steamid} 共拥有 {len(payload.games)} 个游戏")
        return payload.games

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SteamApiClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def parse_identifier(user_input: str) -> Tuple[Optional[str], Optional[str]]:
    """
    把用户输入拆成 (steamid, vanity)，两者恰有一个非空。

    支持 17 位 SteamID64、vanity 名称，以及
    steamcommunity.com/profiles/<id> 或 steamcommunity.com/id/<vanity> 形式的主页链接。
    """
    s = user_input.strip()
    if not s:
        raise ValueError("Steam 标识不能为空")

    m = _PROFILE_URL_RE.search(s)
    if m:
        kind, value = m.group(1), m.group(2)
        if kind == "profiles" and _STEAMID64_RE.fullmatch(value):
            return value, None
        s = value

    if _STEAMID64_RE.fullmatch(s):
        return s, None
    return None, s


def resolve_identifier(client: SteamApiClient, user_input: str) -> str:
    steamid, vanity = parse_identifier(user_input)
    if steamid is not None:
        return steamid
    assert vanity is not None
    return client.resolve_vanity_url(vanity)
