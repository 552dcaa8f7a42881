"""异常定义模块，集中声明模型训练与预测过程中使用的错误类型。"""

from __future__ import annotations


class CanopyError(Exception):
    """Root of every error raised by canopy models.

    中文说明：所有自定义异常的基类，便于调用方统一捕获。
    """


class InvalidInputError(CanopyError, ValueError):
    """Raised when features, labels or hyper-parameters are malformed.

    中文说明：输入为空、行长度不一致、样本数与标签数不匹配或超参数越界时抛出。
    """


class UnsupportedOperationError(CanopyError, NotImplementedError):
    """Raised when a model does not support the requested operation.

    中文说明：例如监督模型调用无标签训练，或对 Bagging 调用 ``clone``。
    """


class UnfittedModelError(CanopyError, RuntimeError):
    """Raised when ``predict`` is called before ``fit``."""


class CorruptTreeError(CanopyError, RuntimeError):
    """Raised when tree traversal meets an out-of-range feature index.

    中文说明：表示树结构与输入样本不一致，属于不变量被破坏的致命错误。
    """


class NoLearnersTrainedError(CanopyError, RuntimeError):
    """Raised when a bagging ensemble ends ``fit`` without any weak learner.

    中文说明：所有子任务均训练失败时抛出，避免空集成静默地参与预测。
    """


__all__ = [
    "CanopyError",
    "InvalidInputError",
    "UnsupportedOperationError",
    "UnfittedModelError",
    "CorruptTreeError",
    "NoLearnersTrainedError",
]
