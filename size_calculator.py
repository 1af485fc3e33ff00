from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from size_catalog import SizeCatalog
from steam_api import OwnedGame


TOP_GAMES_LIMIT = 20
GB_PER_TB = 1024.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedGame:
    name: str
    size: float


@dataclass(frozen=True)
class AggregationResult:
    total_size_gb: float
    total_size_display: str
    total_games: int
    games: List[RankedGame]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_size_gb": self.total_size_gb,
            "total_size_display": self.total_size_display,
            "total_games": self.total_games,
            "games": [{"name": g.name, "size": g.size} for g in self.games],
        }


def format_size(size_gb: float) -> str:
    if size_gb >= GB_PER_TB:
        return f"{size_gb / GB_PER_TB:.2f} TB"
    return f"{size_gb:.2f} GB"


def aggregate(
    owned_games: Sequence[OwnedGame],
    catalog: SizeCatalog,
    limit: int = TOP_GAMES_LIMIT,
) -> AggregationResult:
    """
    把拥有的游戏与大小数据库按 appid 关联，计算总大小并给出按大小排序的前 limit 个游戏。

    没有匹配的游戏不计入总大小和排行，但计入 total_games。
    名称优先使用 Steam 返回的 name，缺失时才用数据库中的名称。
    """
    total_size_gb = 0.0
    matched: List[RankedGame] = []

    for game in owned_games:
        entry = catalog.lookup(game.appid)
        if entry is None:
            continue
        total_size_gb += entry.size_gb
        name = game.name if game.name is not None else entry.name
        matched.append(RankedGame(name=name, size=entry.size_gb))

    logger.info(
        f"总大小: {total_size_gb:.2f} GB, {len(owned_games)} 个游戏中有 {len(matched)} 个找到大小"
    )

    # sorted 是稳定排序，reverse=True 时同样保持相等元素的原有顺序
    ranked = sorted(matched, key=lambda g: g.size, reverse=True)[:limit]

    return AggregationResult(
        total_size_gb=total_size_gb,
        total_size_display=format_size(total_size_gb),
        total_games=len(owned_games),
        games=ranked,
    )
