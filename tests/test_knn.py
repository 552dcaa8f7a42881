"""K 近邻模型单元测试模块。"""

from __future__ import annotations

import numpy as np
import pytest

from canopy.exceptions import InvalidInputError, UnfittedModelError, UnsupportedOperationError
from canopy.models.algorithms.knn import KNNModel

X_TRAIN = [[0.0], [1.0], [10.0], [11.0]]
Y_TRAIN = [0, 0, 1, 1]


@pytest.mark.parametrize("metric", ["euclidean", "manhattan"])
def test_knn_predicts_nearest_cluster(metric: str) -> None:
    model = KNNModel(k=3, metric=metric).fit(X_TRAIN, Y_TRAIN)

    np.testing.assert_array_equal(model.predict([[0.5], [10.5]]), [0, 1])


def test_k_larger_than_training_set_uses_all_rows() -> None:
    model = KNNModel(k=10).fit(X_TRAIN, [0, 1, 1, 1])

    np.testing.assert_array_equal(model.predict([[0.0]]), [1])


def test_vote_tie_resolves_to_lowest_label() -> None:
    model = KNNModel(k=2).fit([[0.0], [2.0]], [1, 0])

    np.testing.assert_array_equal(model.predict([[1.0]]), [0])


def test_feature_count_mismatch_is_rejected() -> None:
    model = KNNModel().fit(X_TRAIN, Y_TRAIN)

    with pytest.raises(InvalidInputError):
        model.predict([[1.0, 2.0]])


@pytest.mark.parametrize("params", [{"k": 0}, {"metric": "cosine"}])
def test_invalid_configuration_is_rejected(params) -> None:
    with pytest.raises(InvalidInputError):
        KNNModel(**params)


def test_unfitted_and_unlabeled_usage_raise() -> None:
    with pytest.raises(UnfittedModelError):
        KNNModel().predict(X_TRAIN)
    with pytest.raises(UnsupportedOperationError):
        KNNModel().fit(X_TRAIN)
