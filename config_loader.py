from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import tomllib

from size_catalog import default_candidate_paths


@dataclass
class SteamConfig:
    api_key: str


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class CatalogConfig:
    paths: List[Path] = field(default_factory=default_candidate_paths)


@dataclass
class AppConfig:
    steam: SteamConfig
    server: ServerConfig
    catalog: CatalogConfig


def load_config(config_path: Path | None = None) -> AppConfig:
    base_dir = Path(__file__).resolve().parent
    raw: dict = {}
    if config_path is None:
        default_path = base_dir / "config.toml"
        if default_path.is_file():
            config_path = default_path
    elif not config_path.is_file():
        raise FileNotFoundError(f"未找到配置文件: {config_path}")

    if config_path is not None:
        base_dir = config_path.resolve().parent
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    steam_section = raw.get("steam", {})
    server_section = raw.get("server", {})
    catalog_section = raw.get("catalog", {})

    api_key_env_var = steam_section.get("api_key_env_var", "STEAM_API_KEY")
    api_key_from_env = os.getenv(api_key_env_var, "").strip()
    api_key_from_file = str(steam_section.get("api_key", "")).strip()

    api_key = api_key_from_env or api_key_from_file
    if not api_key:
        raise ValueError(
            f"未配置 Steam Web API Key，请在环境变量 {api_key_env_var} 或 config.toml 中填写。"
        )

    host = str(server_section.get("host", "0.0.0.0")).strip() or "0.0.0.0"
    port = int(server_section.get("port", 8080))
    if not 0 < port < 65536:
        raise ValueError("server.port 必须在 1-65535 之间。")

    paths_raw = catalog_section.get("paths", [])
    catalog = CatalogConfig()
    if paths_raw:
        catalog = CatalogConfig(paths=[(base_dir / str(p)).resolve() for p in paths_raw])

    return AppConfig(
        steam=SteamConfig(api_key=api_key),
        server=ServerConfig(host=host, port=port),
        catalog=catalog,
    )
