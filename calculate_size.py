#!/usr/bin/env python3
"""
命令行单次计算：解析 Steam 标识 -> 获取游戏列表 -> 计算总大小并输出
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from config_loader import load_config
from size_calculator import AggregationResult, aggregate
from size_catalog import load_catalog
from steam_api import SteamApiClient, SteamApiError, resolve_identifier


logger = logging.getLogger(__name__)


def _print_summary(steamid: str, result: AggregationResult) -> None:
    print(f"Steam ID: {steamid}")
    print(f"游戏总数: {result.total_games}")
    print(f"总大小: {result.total_size_display}")
    if not result.games:
        return
    print(f"最大的 {len(result.games)} 个游戏:")
    for i, game in enumerate(result.games, 1):
        print(f"  {i:>2}. {game.name} - {game.size:.2f} GB")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="估算 Steam 游戏库安装后占用的磁盘空间")
    parser.add_argument("identifier", help="SteamID64、vanity 名称或个人主页链接")
    parser.add_argument("--config", type=Path, default=None, help="config.toml 路径")
    parser.add_argument("--json", action="store_true", help="以 JSON 输出结果")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    load_dotenv()

    try:
        cfg = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"配置错误: {exc}", file=sys.stderr)
        return 1

    catalog = load_catalog(cfg.catalog.paths)

    try:
        with SteamApiClient(api_key=cfg.steam.api_key) as client:
            steamid = resolve_identifier(client, args.identifier)
            owned = client.get_owned_games(steamid)
    except (SteamApiError, ValueError) as exc:
        print(f"错误: {exc}", file=sys.stderr)
        return 1

    result = aggregate(owned, catalog)
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_summary(steamid, result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
