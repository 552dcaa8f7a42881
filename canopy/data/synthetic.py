"""合成数据模块，借助 scikit-learn 生成分类演示数据集。"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.datasets import make_blobs, make_circles, make_moons


def _blobs(n_samples: int, random_state: Optional[int], **params: Any) -> Tuple[np.ndarray, np.ndarray]:
    params.setdefault("centers", 3)
    params.setdefault("n_features", 2)
    params.setdefault("cluster_std", 1.0)
    return make_blobs(n_samples=n_samples, random_state=random_state, **params)


def _moons(n_samples: int, random_state: Optional[int], **params: Any) -> Tuple[np.ndarray, np.ndarray]:
    params.setdefault("noise", 0.1)
    return make_moons(n_samples=n_samples, random_state=random_state, **params)


def _circles(n_samples: int, random_state: Optional[int], **params: Any) -> Tuple[np.ndarray, np.ndarray]:
    params.setdefault("noise", 0.05)
    params.setdefault("factor", 0.5)
    return make_circles(n_samples=n_samples, random_state=random_state, **params)


_GENERATORS: Dict[str, Callable[..., Tuple[np.ndarray, np.ndarray]]] = {
    "blobs": _blobs,
    "moons": _moons,
    "circles": _circles,
}


def make_dataset(
    kind: str = "blobs",
    n_samples: int = 200,
    random_state: Optional[int] = None,
    **params: Any,
) -> Tuple[pd.DataFrame, pd.Series]:
    """Generate a synthetic classification dataset.

    中文说明：支持 ``blobs``、``moons`` 与 ``circles`` 三种形态，
    特征列命名为 ``feature_0``、``feature_1`` ……，标签为整数序列。
    """

    key = kind.lower()
    if key not in _GENERATORS:
        raise ValueError(f"Unknown synthetic dataset kind: {kind}")
    X, y = _GENERATORS[key](n_samples, random_state, **params)
    columns = [f"feature_{i}" for i in range(X.shape[1])]
    return pd.DataFrame(X, columns=columns), pd.Series(y.astype("int64"), name="label")


__all__ = ["make_dataset"]
