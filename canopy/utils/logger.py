"""日志配置模块，基于 loguru 统一控制台与文件日志输出。"""

from __future__ import annotations

import pathlib
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"

_configured_key: Optional[tuple] = None


def setup_logging(level: str = "INFO", log_dir: Optional[str | pathlib.Path] = None) -> None:
    """Configure the global loguru logger.

    中文说明：移除 loguru 默认输出，添加控制台输出；若给出 ``log_dir``，
    额外按天切割写入文件。相同参数重复调用不会重复添加输出。
    """

    global _configured_key
    key = (level.upper(), str(log_dir) if log_dir else None)
    if _configured_key == key:
        return

    logger.remove()
    logger.add(sys.stderr, level=key[0], format=LOG_FORMAT)
    if log_dir:
        path = pathlib.Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        logger.add(
            sink=str(path / "{time:YYYY-MM-DD}.log"),
            rotation="1 day",
            retention="30 days",
            level=key[0],
            format=LOG_FORMAT,
            enqueue=True,  # 多线程训练时保证写入安全
        )
    _configured_key = key
    logger.debug("Logger initialized at level {}", key[0])


__all__ = ["setup_logging", "logger"]
