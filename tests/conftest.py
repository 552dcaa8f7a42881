"""Pytest 配置文件，用于调整导入路径并静默日志输出。"""

import sys
from pathlib import Path

import pytest
from loguru import logger

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    # 将项目根目录加入 sys.path，确保测试能够导入包。
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _silence_logger():
    """测试期间丢弃全部日志，避免并行训练日志干扰输出。"""

    logger.remove()
    logger.add(lambda msg: None)
    yield
    logger.remove()
