"""模型算法基类模块，定义统一的训练、预测与克隆接口。"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np
from loguru import logger

from canopy.exceptions import UnfittedModelError, UnsupportedOperationError


class BaseModel(ABC):
    """Abstract base class for trainable classifiers.

    中文说明：为所有模型实现提供统一的入参存储、训练、预测与克隆接口，
    使 Bagging 等集成方法无需关心具体学习器类型。
    """

    def __init__(self, **params: Any) -> None:
        """Store initialization parameters for concrete models.

        中文说明：保存模型初始化参数，供 ``get_params`` 与 ``clone`` 使用。
        """
        self.params = params

    @abstractmethod
    def fit(self, X: Any, y: Optional[Any] = None) -> "BaseModel":
        """Train the model on features and (for supervised models) labels.

        中文说明：在子类中实现训练逻辑，并返回自身以支持链式调用。
        ``y`` 为 ``None`` 表示无标签训练，监督模型应调用 ``_reject_unlabeled``。
        """
        raise NotImplementedError

    @abstractmethod
    def predict(self, X: Any) -> np.ndarray:
        """Return one integer label per row of ``X``.

        中文说明：在子类中实现预测逻辑，未训练时应抛出 ``UnfittedModelError``。
        """
        raise NotImplementedError

    def clone(self) -> "BaseModel":
        """Return an independent copy sharing no state with this instance.

        中文说明：默认深拷贝整个对象，已训练模型的内部状态（如整棵树）也会被复制。
        """
        return copy.deepcopy(self)

    def set_random_state(self, random_state: Any) -> None:
        """Re-seed internal randomness; models without randomness ignore it.

        中文说明：Bagging 为每个克隆分配独立的随机种子，保证并行训练可复现。
        """
        return None

    def get_params(self) -> Dict[str, Any]:
        """Return the constructor configuration of this model."""

        return dict(self.params)

    def _reject_unlabeled(self, y: Optional[Any]) -> None:
        """Fail fast when a supervised model is asked to fit without labels."""

        if y is None:
            name = type(self).__name__
            logger.error("fit without labels is not supported for {}", name)
            raise UnsupportedOperationError(f"fit without labels is not supported for {name}")

    def _check_is_fitted(self, attribute: str) -> None:
        """Raise ``UnfittedModelError`` if ``attribute`` has not been set by ``fit``."""

        if getattr(self, attribute, None) is None:
            raise UnfittedModelError(
                f"{type(self).__name__} must be fitted before calling predict"
            )

    def __repr__(self) -> str:
        args = ", ".join(f"{key}={value!r}" for key, value in self.params.items())
        return f"{type(self).__name__}({args})"
