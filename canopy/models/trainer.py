from __future__ import annotations

"""模型训练模块，负责按配置构建模型并在 pandas 数据上完成训练与预测。"""

from typing import Any, Dict, List

import pandas as pd
from loguru import logger

from .algorithms import build_model
from .algorithms.base import BaseModel


class ModelTrainer:
    """Build a model from configuration and run it on pandas data.

    中文说明：根据配置通过注册表实例化模型，统一训练与预测流程，
    并保证预测结果与输入索引对齐。
    """

    def __init__(self, model_cfg: Dict[str, Any]) -> None:
        """Initialize trainer with a model configuration dictionary.

        中文说明：配置需包含 ``name`` 字段，可选 ``params``；未知模型名会抛出 ValueError。
        """
        self.model: BaseModel = build_model(model_cfg)
        self.model_name: str = model_cfg["name"]
        self.feature_names_: List[str] = []

    def fit(self, X: pd.DataFrame, y: pd.Series) -> "ModelTrainer":
        """Fit the underlying model.

        中文说明：记录训练时的特征列顺序，预测时按同样顺序取列。
        """
        self.feature_names_ = list(X.columns)
        logger.info(
            "Fitting model '{}' on {} rows x {} features",
            self.model_name,
            X.shape[0],
            X.shape[1],
        )
        self.model.fit(X[self.feature_names_], y)
        return self

    def predict(self, X: pd.DataFrame) -> pd.Series:
        """Generate predictions aligned with ``X.index``.

        中文说明：缺少训练时的特征列会抛出 KeyError，提醒调用方数据不一致。
        """
        preds = self.model.predict(X[self.feature_names_])
        return pd.Series(preds, index=X.index, name="prediction")
