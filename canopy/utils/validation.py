"""输入校验模块，将各类数组形式统一转换为 numpy 数组并检查合法性。"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np
import pandas as pd

from canopy.exceptions import InvalidInputError


def check_features(X: Any) -> np.ndarray:
    """Coerce a feature matrix into a 2-D ``float64`` array.

    中文说明：支持嵌套列表、ndarray 与 DataFrame；空矩阵或行长度不一致时抛出
    ``InvalidInputError``。
    """

    if X is None:
        raise InvalidInputError("Feature matrix must not be None")
    try:
        if isinstance(X, pd.DataFrame):
            values = X.to_numpy(dtype=float)
        elif isinstance(X, np.ndarray):
            values = X.astype(float, copy=False)
        else:
            rows = list(X)
            if not rows:
                raise InvalidInputError("Feature matrix must not be empty")
            # 中文说明：numpy 无法直接识别不规则嵌套列表，需先逐行比较长度。
            widths = {len(row) for row in rows}
            if len(widths) != 1:
                raise InvalidInputError("All feature rows must have the same number of features")
            values = np.asarray(rows, dtype=float)
    except (TypeError, ValueError) as exc:
        if isinstance(exc, InvalidInputError):
            raise
        raise InvalidInputError(f"Feature matrix must contain real numbers: {exc}") from exc

    if values.ndim != 2:
        raise InvalidInputError(f"Feature matrix must be 2-dimensional, got shape {values.shape}")
    if values.shape[0] == 0 or values.shape[1] == 0:
        raise InvalidInputError("Feature matrix must not be empty")
    return values


def check_labels(y: Any) -> np.ndarray:
    """Coerce a label vector into a 1-D array of non-negative integers."""

    if y is None:
        raise InvalidInputError("Label vector must not be None")
    if isinstance(y, pd.Series):
        raw = y.to_numpy()
    else:
        raw = np.asarray(list(y) if not isinstance(y, np.ndarray) else y)
    if raw.ndim != 1:
        raise InvalidInputError(f"Label vector must be 1-dimensional, got shape {raw.shape}")
    if raw.size == 0:
        raise InvalidInputError("Label vector must not be empty")
    if raw.dtype.kind == "f":
        # 中文说明：允许 1.0 这类整值浮点标签，但拒绝真正的小数。
        if not np.all(np.equal(np.mod(raw, 1), 0)):
            raise InvalidInputError("Labels must be integers")
    elif raw.dtype.kind not in {"i", "u", "b"}:
        raise InvalidInputError(f"Labels must be integers, got dtype {raw.dtype}")
    labels = raw.astype(np.int64)
    if labels.min() < 0:
        raise InvalidInputError("Labels must be non-negative integers")
    return labels


def check_fit_input(X: Any, y: Optional[Any]) -> Tuple[np.ndarray, np.ndarray]:
    """Validate a supervised training pair and return the coerced arrays."""

    features = check_features(X)
    labels = check_labels(y)
    if features.shape[0] != labels.shape[0]:
        raise InvalidInputError(
            f"X has {features.shape[0]} rows but y has {labels.shape[0]} labels"
        )
    return features, labels


__all__ = ["check_features", "check_labels", "check_fit_input"]
