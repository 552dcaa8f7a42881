"""K 近邻分类模块，以距离最近的 k 个训练样本投票决定标签。"""

from __future__ import annotations

import numbers
from typing import Any, Optional

import numpy as np

from canopy.exceptions import InvalidInputError
from canopy.utils.counter import most_common
from canopy.utils.distance import DISTANCE_FUNCTIONS
from canopy.utils.validation import check_features, check_fit_input

from .base import BaseModel
from .registry import register_model


@register_model("knn")
class KNNModel(BaseModel):
    """K-nearest-neighbours classifier.

    中文说明：训练阶段仅保存样本；预测时计算到全部训练样本的距离，
    取最近 ``k`` 个样本的多数标签（并列取最小标签）。
    """

    def __init__(self, k: int = 3, metric: str = "euclidean") -> None:
        if not isinstance(k, numbers.Integral) or k < 1:
            raise InvalidInputError("The value of k must be greater than zero")
        if metric not in DISTANCE_FUNCTIONS:
            raise InvalidInputError(
                f"Invalid distance metric. Must be one of: {', '.join(sorted(DISTANCE_FUNCTIONS))}"
            )
        super().__init__(k=k, metric=metric)
        self.k = int(k)
        self.metric = metric
        self.X_train_: Optional[np.ndarray] = None
        self.y_train_: Optional[np.ndarray] = None

    def fit(self, X: Any, y: Optional[Any] = None) -> "KNNModel":
        self._reject_unlabeled(y)
        self.X_train_, self.y_train_ = check_fit_input(X, y)
        return self

    def predict(self, X: Any) -> np.ndarray:
        self._check_is_fitted("X_train_")
        features = check_features(X)
        if features.shape[1] != self.X_train_.shape[1]:
            raise InvalidInputError(
                "The number of features in the test data must match the training data"
            )

        distance = DISTANCE_FUNCTIONS[self.metric]
        # 中文说明：训练样本少于 k 时退化为使用全部样本投票。
        k = min(self.k, self.X_train_.shape[0])
        predictions = np.empty(features.shape[0], dtype=np.int64)
        for i, row in enumerate(features):
            distances = distance(row, self.X_train_)
            nearest = np.argsort(distances, kind="stable")[:k]
            predictions[i] = most_common(self.y_train_[nearest])
        return predictions


__all__ = ["KNNModel"]
