"""随机森林模型单元测试模块。"""

from __future__ import annotations

import numpy as np
import pytest

from canopy.data.synthetic import make_dataset
from canopy.exceptions import InvalidInputError, UnfittedModelError, UnsupportedOperationError
from canopy.models.algorithms.random_forest import RandomForestModel


@pytest.fixture
def blobs():
    X, y = make_dataset("blobs", n_samples=150, random_state=0)
    return X, y


def test_forest_fits_separable_data(blobs) -> None:
    X, y = blobs
    forest = RandomForestModel(n_trees=7, n_features="sqrt", random_state=1)

    forest.fit(X, y)
    predictions = forest.predict(X)

    assert len(forest.estimators_) == 7
    assert predictions.shape == (150,)
    assert np.mean(predictions == y.to_numpy()) >= 0.9


def test_forest_is_reproducible_across_worker_counts(blobs) -> None:
    X, y = blobs
    serial = RandomForestModel(n_trees=5, n_features=1, random_state=3, n_workers=1).fit(X, y)
    threaded = RandomForestModel(n_trees=5, n_features=1, random_state=3, n_workers=3).fit(X, y)

    np.testing.assert_array_equal(serial.predict(X), threaded.predict(X))


def test_worker_count_defaults_to_tree_count() -> None:
    assert RandomForestModel(n_trees=4).bagging.n_workers == 4


def test_clone_returns_untrained_forest_with_same_configuration(blobs) -> None:
    """克隆只复制配置，克隆体未训练。"""

    X, y = blobs
    forest = RandomForestModel(n_trees=3, max_depth=4, random_state=2).fit(X, y)

    copy = forest.clone()

    assert copy.get_params() == forest.get_params()
    assert copy.estimators_ == []
    with pytest.raises(UnfittedModelError):
        copy.predict(X)


def test_training_data_is_kept_for_diagnostics(blobs) -> None:
    X, y = blobs
    forest = RandomForestModel(n_trees=2, random_state=0).fit(X, y)

    assert forest.X_train_.shape == (150, 2)
    np.testing.assert_array_equal(forest.y_train_, y.to_numpy())


def test_fit_without_labels_is_unsupported(blobs) -> None:
    X, _ = blobs
    with pytest.raises(UnsupportedOperationError):
        RandomForestModel(n_trees=2).fit(X)


@pytest.mark.parametrize("params", [{"n_trees": 0}, {"n_features": "all"}, {"max_depth": -2}])
def test_invalid_configuration_is_rejected(params) -> None:
    with pytest.raises(InvalidInputError):
        RandomForestModel(**params)
