#!/usr/bin/env python3
"""
Steam 游戏库大小计算服务启动脚本

- 加载 .env 与 config.toml
- 加载 game_sizes_database.json（找不到时使用空数据库，不影响启动）
- 启动 uvicorn
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from config_loader import load_config
from size_api import create_app
from size_catalog import load_catalog


LOG_FORMAT = '%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - [PID:%(process)d] %(message)s'

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    env_path = Path(__file__).resolve().parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    else:
        logger.warning(".env 文件不存在，尝试从环境变量读取配置")

    logger.info(f"当前工作目录: {os.getcwd()}")
    cfg = load_config()
    logger.info(f"使用 Steam API Key: {cfg.steam.api_key[:5]}...")

    catalog = load_catalog(cfg.catalog.paths)
    logger.info(f"已加载 {len(catalog)} 条游戏大小数据")

    app = create_app(cfg, catalog)
    logger.info(f"服务启动于 {cfg.server.host}:{cfg.server.port}")
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)


if __name__ == "__main__":
    main()
