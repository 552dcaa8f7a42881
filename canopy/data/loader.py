"""数据加载模块，负责从 CSV 文件读取特征矩阵与标签向量。"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd
from loguru import logger


@dataclass
class DataConfig:
    """Dataset section of the workflow configuration.

    中文说明：``path`` 与 ``synthetic`` 二选一；``feature_columns`` 为空时使用除标签列外的全部列。
    """

    path: Optional[str] = None
    label_column: str = "label"
    feature_columns: Optional[List[str]] = None
    synthetic: Dict[str, Any] = field(default_factory=dict)


class DatasetLoader:
    """Load a labelled CSV file into a feature frame and a label series.

    中文说明：读取 CSV，拆分为数值特征 ``DataFrame`` 与整数标签 ``Series``。
    """

    def __init__(
        self,
        path: str | pathlib.Path,
        label_column: str = "label",
        feature_columns: Optional[Sequence[str]] = None,
    ) -> None:
        self.path = pathlib.Path(path)
        self.label_column = label_column
        self.feature_columns = list(feature_columns) if feature_columns else None

    def load(self) -> Tuple[pd.DataFrame, pd.Series]:
        """Read the CSV file and return ``(X, y)``.

        中文说明：文件不存在抛出 FileNotFoundError；缺少标签列抛出 KeyError；
        特征列含非数值内容时抛出 ValueError。
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Dataset not found: {self.path}")

        df = pd.read_csv(self.path)
        if self.label_column not in df.columns:
            raise KeyError(f"Label column '{self.label_column}' not found in {self.path}")

        columns = self.feature_columns or [c for c in df.columns if c != self.label_column]
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise KeyError(f"Feature columns not found in {self.path}: {missing}")

        features = df[columns]
        non_numeric = [c for c in columns if not pd.api.types.is_numeric_dtype(features[c])]
        if non_numeric:
            raise ValueError(f"Feature columns must be numeric, got: {non_numeric}")

        labels = df[self.label_column].astype("int64")
        logger.info(
            "Loaded {} rows x {} features from {}", len(df), len(columns), self.path
        )
        return features.astype("float64"), labels
