"""工作流编排模块，串联配置加载、数据准备、模型训练与评估。"""

from __future__ import annotations

from typing import Any, Dict, Tuple

import pandas as pd
from loguru import logger

from canopy.config.loader import ConfigLoader
from canopy.data.loader import DataConfig, DatasetLoader
from canopy.data.synthetic import make_dataset
from canopy.dataset.splitter import SplitConfig, train_validation_split
from canopy.metrics.evaluator import evaluate
from canopy.models.trainer import ModelTrainer
from canopy.utils.logger import setup_logging

DEFAULT_METRICS = ["accuracy"]


def _load_dataset(data_cfg: DataConfig) -> Tuple[pd.DataFrame, pd.Series]:
    """Read the configured CSV file or generate a synthetic dataset.

    中文说明：优先使用 ``path``；未配置路径时根据 ``synthetic`` 段生成演示数据。
    """

    if data_cfg.path:
        loader = DatasetLoader(data_cfg.path, data_cfg.label_column, data_cfg.feature_columns)
        return loader.load()
    if data_cfg.synthetic:
        synthetic = dict(data_cfg.synthetic)
        kind = synthetic.pop("kind", "blobs")
        logger.info("Generating synthetic '{}' dataset", kind)
        return make_dataset(kind, **synthetic)
    raise ValueError("Data configuration must define either 'path' or 'synthetic'")


def run_workflow(config_path: str) -> Dict[str, Any]:
    """Execute the training workflow and return validation metrics.

    中文说明：依次完成配置解析、数据加载、训练/验证划分、模型训练与指标计算，
    返回结果中额外包含训练集与验证集的样本数量。
    """

    config = ConfigLoader(config_path).load()

    logging_cfg = config.get("logging")
    if logging_cfg:
        setup_logging(logging_cfg.get("level", "INFO"), logging_cfg.get("log_dir"))

    if "model" not in config:
        raise ValueError("Configuration must include a 'model' section")

    data_cfg = DataConfig(**config.get("data", {}))
    split_cfg = SplitConfig(**config.get("split", {}))
    metric_names = config.get("metrics") or DEFAULT_METRICS

    X, y = _load_dataset(data_cfg)
    X_train, X_val, y_train, y_val = train_validation_split(
        X,
        y,
        validation_ratio=split_cfg.validation_ratio,
        random_state=split_cfg.random_state,
    )

    trainer = ModelTrainer(config["model"])
    trainer.fit(X_train, y_train)
    predictions = trainer.predict(X_val)

    results: Dict[str, Any] = evaluate(y_val, predictions, metric_names)
    results["n_train"] = int(len(X_train))
    results["n_validation"] = int(len(X_val))
    logger.info("Validation metrics for '{}': {}", trainer.model_name, results)
    return results


__all__ = ["run_workflow"]
