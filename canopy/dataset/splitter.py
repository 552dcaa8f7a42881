"""数据集划分模块，将样本随机划分为训练集与验证集。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd
from sklearn.model_selection import train_test_split


@dataclass
class SplitConfig:
    """Train/validation split configuration.

    中文说明：``validation_ratio`` 为验证集占比，``random_state`` 控制打乱顺序。
    """

    validation_ratio: float = 0.2
    random_state: Optional[int] = None


def train_validation_split(
    X: pd.DataFrame,
    y: pd.Series,
    validation_ratio: float = 0.2,
    random_state: Optional[int] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.Series, pd.Series]:
    """Shuffle and split ``(X, y)`` into training and validation parts.

    中文说明：返回 ``(X_train, X_val, y_train, y_val)``，保留原始索引。
    """

    if not 0.0 < validation_ratio < 1.0:
        raise ValueError("validation_ratio must be between 0 and 1 (exclusive)")
    if len(X) != len(y):
        raise ValueError("Features and labels must have the same number of rows")
    X_train, X_val, y_train, y_val = train_test_split(
        X, y, test_size=validation_ratio, random_state=random_state, shuffle=True
    )
    return X_train, X_val, y_train, y_val


__all__ = ["SplitConfig", "train_validation_split"]
