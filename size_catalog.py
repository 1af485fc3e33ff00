from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


DATA_FILE_NAME = "game_sizes_database.json"

logger = logging.getLogger(__name__)


class CatalogLoadFailure(Exception):
    """候选路径上的数据文件不存在或内容无效。"""


@dataclass(frozen=True)
class SizeEntry:
    appid: str
    name: str
    size_gb: float


class SizeCatalog:
    """appid -> SizeEntry 的只读映射，启动时加载一次，之后所有请求共享。"""

    def __init__(self, entries: Optional[Mapping[str, SizeEntry]] = None) -> None:
        self._entries: Mapping[str, SizeEntry] = MappingProxyType(dict(entries or {}))

    @property
    def entries(self) -> Mapping[str, SizeEntry]:
        return self._entries

    def lookup(self, appid: Any) -> Optional[SizeEntry]:
        return self._entries.get(str(appid))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, appid: object) -> bool:
        return str(appid) in self._entries


def default_candidate_paths() -> List[Path]:
    module_dir = Path(__file__).resolve().parent
    return [
        Path("static") / DATA_FILE_NAME,
        Path("..") / "static" / DATA_FILE_NAME,
        Path("..") / ".." / "static" / DATA_FILE_NAME,
        module_dir / "static" / DATA_FILE_NAME,
    ]


def _pairs_last_wins(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            logger.warning(f"数据文件中 appid {key} 重复，使用最后一条")
        result[key] = value
    return result


def _parse_entry(appid: str, raw: Any) -> SizeEntry:
    if not isinstance(raw, dict):
        raise CatalogLoadFailure(f"appid {appid} 的条目不是对象")
    name = raw.get("name")
    if not isinstance(name, str):
        raise CatalogLoadFailure(f"appid {appid} 缺少 name 字段")
    size = raw.get("size_gb")
    if isinstance(size, bool) or not isinstance(size, (int, float)):
        raise CatalogLoadFailure(f"appid {appid} 的 size_gb 不是数字")
    size = float(size)
    if not math.isfinite(size) or size < 0:
        raise CatalogLoadFailure(f"appid {appid} 的 size_gb 无效: {size}")
    return SizeEntry(appid=appid, name=name, size_gb=size)


def read_catalog_file(path: Path) -> SizeCatalog:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogLoadFailure(f"无法读取 {path}: {exc}") from exc

    # 对象内的重复 key 以 object_pairs_hook 处理（后出现者覆盖前者）
    try:
        raw = json.loads(content, object_pairs_hook=_pairs_last_wins)
    except ValueError as exc:
        raise CatalogLoadFailure(f"JSON 解析失败: {exc}") from exc

    if not isinstance(raw, dict):
        raise CatalogLoadFailure("数据文件顶层不是 JSON 对象")

    entries = {appid: _parse_entry(appid, value) for appid, value in raw.items()}
    return SizeCatalog(entries)


def load_catalog(candidate_paths: Optional[Iterable[Path]] = None) -> SizeCatalog:
    if candidate_paths is None:
        candidate_paths = default_candidate_paths()

    for path in candidate_paths:
        path = Path(path)
        logger.info(f"尝试从 {path} 加载游戏大小数据")
        if not path.is_file():
            logger.info(f"文件不存在: {path}")
            continue
        try:
            catalog = read_catalog_file(path)
        except CatalogLoadFailure as exc:
            logger.error(f"加载 {path} 失败，跳过: {exc}")
            continue
        logger.info(f"成功从 {path} 加载 {len(catalog)} 条游戏大小数据")
        return catalog

    logger.warning(f"所有候选路径都未找到可用的 {DATA_FILE_NAME}，使用空数据库")
    return SizeCatalog()
