"""多数投票工具模块，提供标签计数与逐行众数聚合。"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def most_common(labels: Sequence[int] | np.ndarray) -> int:
    """Return the most frequent label, preferring the lowest label on ties.

    中文说明：``np.unique`` 返回升序标签，``argmax`` 在并列时取第一个即最小标签；
    计数数组长度只与不同标签个数有关，与标签取值大小无关。
    """

    values = np.asarray(labels, dtype=np.int64)
    if values.size == 0:
        raise ValueError("Cannot find the most common element of an empty collection")
    distinct, counts = np.unique(values, return_counts=True)
    return int(distinct[counts.argmax()])


def plurality_vote(predictions: np.ndarray) -> np.ndarray:
    """Aggregate a ``(n_learners, n_samples)`` matrix into one label per sample.

    中文说明：逐列统计各学习器的预测票数，取票数最多者；并列时取最小标签，
    因此结果与学习器的排列顺序无关。
    """

    votes = np.asarray(predictions, dtype=np.int64)
    if votes.ndim != 2 or votes.shape[0] == 0:
        raise ValueError("Predictions must be a non-empty (n_learners, n_samples) matrix")
    labels, encoded = np.unique(votes, return_inverse=True)
    encoded = encoded.reshape(votes.shape)
    # 中文说明：按编码后的标签构造计数矩阵 (n_samples, n_distinct_labels)，避免 Python 层循环。
    counts = np.zeros((votes.shape[1], labels.size), dtype=np.int64)
    sample_index = np.broadcast_to(np.arange(votes.shape[1]), votes.shape)
    np.add.at(counts, (sample_index.ravel(), encoded.ravel()), 1)
    return labels[counts.argmax(axis=1)]


__all__ = ["most_common", "plurality_vote"]
