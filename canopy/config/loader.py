"""配置加载模块，封装 YAML 文件解析逻辑。"""

from __future__ import annotations

import pathlib
from typing import Any, Dict

import yaml


class ConfigLoader:
    """Utility for reading YAML configuration files.

    中文说明
    -------
    该类用于读取工作流 YAML 配置文件，顶层必须是映射结构。

    Parameters
    ----------
    path:
        Path to the YAML configuration file.
    """

    def __init__(self, path: str | pathlib.Path) -> None:
        """Initialize the loader with a path.

        中文说明：接受字符串或 ``Path`` 对象并转换为 ``Path`` 实例。
        """
        self.path = pathlib.Path(path)

    def load(self) -> Dict[str, Any]:
        """Load the YAML configuration file.

        中文说明
        -------
        读取 YAML 文本并解析；空文件返回空字典。

        Returns
        -------
        dict
            Parsed configuration dictionary.
        """

        with self.path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration root must be a mapping, got {type(data).__name__}: {self.path}"
            )
        return data
