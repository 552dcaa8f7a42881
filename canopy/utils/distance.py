"""距离函数模块，提供 KNN 使用的欧氏距离与曼哈顿距离。"""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

from canopy.exceptions import InvalidInputError


def _check_shapes(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape[-1] != b.shape[-1]:
        raise InvalidInputError("Points must have the same number of dimensions")


def euclidean(a, b, squared: bool = False) -> np.ndarray:
    """Euclidean distance between ``a`` and each row of ``b`` (broadcasting)."""

    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    _check_shapes(a, b)
    total = np.sum((a - b) ** 2, axis=-1)
    return total if squared else np.sqrt(total)


def manhattan(a, b) -> np.ndarray:
    """Manhattan (L1) distance between ``a`` and each row of ``b``."""

    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    _check_shapes(a, b)
    return np.sum(np.abs(a - b), axis=-1)


DISTANCE_FUNCTIONS: Dict[str, Callable[..., np.ndarray]] = {
    "euclidean": euclidean,
    "manhattan": manhattan,
}


__all__ = ["euclidean", "manhattan", "DISTANCE_FUNCTIONS"]
