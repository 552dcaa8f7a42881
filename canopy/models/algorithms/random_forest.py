"""随机森林模型模块，以逐次切分随机选特征的决策树作为 Bagging 原型。"""

from __future__ import annotations

from typing import Any, List, Optional

import numpy as np

from canopy.utils.validation import check_features, check_fit_input

from .bagging import BaggingModel
from .base import BaseModel
from .decision_tree import DecisionTreeModel
from .registry import register_model


@register_model("random_forest")
class RandomForestModel(BaseModel):
    """Random forest classifier: bagged feature-subsampling decision trees.

    中文说明：组合一棵决策树配置与一个 Bagging 引擎，训练与预测均直接委托给 Bagging。
    """

    def __init__(
        self,
        n_trees: int = 10,
        min_samples_split: int = 2,
        max_depth: Optional[int] = 100,
        n_features: Optional[int | str] = None,
        sample_fraction: float = 1.0,
        random_state: Optional[int] = None,
        n_workers: Optional[int] = None,
    ) -> None:
        super().__init__(
            n_trees=n_trees,
            min_samples_split=min_samples_split,
            max_depth=max_depth,
            n_features=n_features,
            sample_fraction=sample_fraction,
            random_state=random_state,
            n_workers=n_workers,
        )
        self.base_tree = DecisionTreeModel(
            min_samples_split=min_samples_split,
            max_depth=max_depth,
            n_features=n_features,
        )
        # 中文说明：未指定线程数时每棵树一个工作线程。
        self.bagging = BaggingModel(
            self.base_tree,
            n_bags=n_trees,
            sample_fraction=sample_fraction,
            random_state=random_state,
            n_workers=n_workers if n_workers is not None else n_trees,
        )
        self.X_train_: Optional[np.ndarray] = None
        self.y_train_: Optional[np.ndarray] = None

    @property
    def estimators_(self) -> List[BaseModel]:
        """Trained trees of the underlying bagging engine."""

        return self.bagging.estimators_

    def fit(self, X: Any, y: Optional[Any] = None) -> "RandomForestModel":
        """Validate the training data and delegate to the bagging engine."""

        self._reject_unlabeled(y)
        features, labels = check_fit_input(X, y)
        # 中文说明：仅用于诊断，保存最近一次训练数据。
        self.X_train_ = features
        self.y_train_ = labels
        self.bagging.fit(features, labels)
        return self

    def predict(self, X: Any) -> np.ndarray:
        return self.bagging.predict(check_features(X))

    def set_random_state(self, random_state: Any) -> None:
        self.params["random_state"] = random_state
        self.bagging.set_random_state(random_state)

    def clone(self) -> "RandomForestModel":
        """Build a fresh, untrained forest with the same configuration.

        中文说明：克隆只复制配置，不复制已训练的决策树。
        """
        return RandomForestModel(**self.get_params())


__all__ = ["RandomForestModel"]
