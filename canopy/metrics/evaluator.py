"""指标评估模块，提供分类模型验证所需的评分函数。"""

from __future__ import annotations

from typing import Callable, Dict, Iterable

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    balanced_accuracy_score,
    classification_report,
    confusion_matrix,
    f1_score,
    matthews_corrcoef,
    multilabel_confusion_matrix,
    precision_score,
    recall_score,
)


def _check_lengths(y_true: pd.Series, y_pred: pd.Series) -> None:
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must contain the same number of observations")


def _accuracy(y_true: pd.Series, y_pred: pd.Series) -> float:
    """Fraction of correctly classified samples (higher is better)."""

    _check_lengths(y_true, y_pred)
    return float(accuracy_score(np.asarray(y_true), np.asarray(y_pred)))


def _precision(y_true: pd.Series, y_pred: pd.Series) -> float:
    """Macro-averaged precision.

    中文说明：对每个类别分别计算精确率后取平均，无预测样本的类别记为 0。
    """

    _check_lengths(y_true, y_pred)
    return float(
        precision_score(np.asarray(y_true), np.asarray(y_pred), average="macro", zero_division=0)
    )


def _recall(y_true: pd.Series, y_pred: pd.Series) -> float:
    """Macro-averaged recall."""

    _check_lengths(y_true, y_pred)
    return float(
        recall_score(np.asarray(y_true), np.asarray(y_pred), average="macro", zero_division=0)
    )


def _f1(y_true: pd.Series, y_pred: pd.Series) -> float:
    """Macro-averaged F1 score."""

    _check_lengths(y_true, y_pred)
    return float(f1_score(np.asarray(y_true), np.asarray(y_pred), average="macro", zero_division=0))


def _specificity(y_true: pd.Series, y_pred: pd.Series) -> float:
    """Macro-averaged specificity, TN / (TN + FP) per class.

    中文说明：对每个类别按一对其余计算真负率后取平均，分母为 0 的类别记为 0。
    """

    _check_lengths(y_true, y_pred)
    per_class = multilabel_confusion_matrix(np.asarray(y_true), np.asarray(y_pred))
    tn = per_class[:, 0, 0].astype(float)
    fp = per_class[:, 0, 1].astype(float)
    denom = tn + fp
    scores = np.divide(tn, denom, out=np.zeros_like(tn), where=denom > 0)
    return float(scores.mean())


def _balanced_accuracy(y_true: pd.Series, y_pred: pd.Series) -> float:
    _check_lengths(y_true, y_pred)
    return float(balanced_accuracy_score(np.asarray(y_true), np.asarray(y_pred)))


def _mcc(y_true: pd.Series, y_pred: pd.Series) -> float:
    """Matthews correlation coefficient, in [-1, 1]."""

    _check_lengths(y_true, y_pred)
    return float(matthews_corrcoef(np.asarray(y_true), np.asarray(y_pred)))


_METRIC_REGISTRY: Dict[str, Callable[[pd.Series, pd.Series], float]] = {
    "accuracy": _accuracy,
    "precision": _precision,
    "recall": _recall,
    "f1": _f1,
    "specificity": _specificity,
    "balanced_accuracy": _balanced_accuracy,
    "mcc": _mcc,
}


def get_metric(metric_name: str) -> Callable[[pd.Series, pd.Series], float]:
    """Return the scoring function associated with the given metric name.

    中文说明：根据配置名称获取对应的评分函数，如找不到则抛出异常提醒调用者。
    """

    key = metric_name.lower()
    if key not in _METRIC_REGISTRY:
        raise ValueError(f"Unknown metric: {metric_name}")
    return _METRIC_REGISTRY[key]


def evaluate(y_true: pd.Series, y_pred: pd.Series, metric_names: Iterable[str]) -> Dict[str, float]:
    """Compute every requested metric and return them keyed by name."""

    return {name: get_metric(name)(y_true, y_pred) for name in metric_names}


def confusion(y_true: pd.Series, y_pred: pd.Series) -> pd.DataFrame:
    """Confusion matrix with true labels as rows and predicted labels as columns.

    中文说明：行列均为两个向量中出现过的全部标签（升序）。
    """

    _check_lengths(y_true, y_pred)
    labels = np.union1d(np.asarray(y_true), np.asarray(y_pred))
    matrix = confusion_matrix(np.asarray(y_true), np.asarray(y_pred), labels=labels)
    return pd.DataFrame(
        matrix,
        index=pd.Index(labels, name="true"),
        columns=pd.Index(labels, name="predicted"),
    )


def summary(y_true: pd.Series, y_pred: pd.Series) -> pd.DataFrame:
    """Per-class precision, recall, F1 and support plus macro/weighted averages.

    中文说明：基于 ``classification_report`` 生成表格，行是类别与平均方式，列是各项指标。
    """

    _check_lengths(y_true, y_pred)
    report = classification_report(
        np.asarray(y_true), np.asarray(y_pred), output_dict=True, zero_division=0
    )
    # 中文说明：accuracy 在报告中是标量，单独从表格中移除。
    report.pop("accuracy", None)
    return pd.DataFrame(report).T


__all__ = ["get_metric", "evaluate", "confusion", "summary"]
