"""Bagging 集成模型单元测试模块。"""

from __future__ import annotations

import threading
from typing import Any, Optional

import numpy as np
import pytest

from canopy.exceptions import (
    InvalidInputError,
    NoLearnersTrainedError,
    UnfittedModelError,
    UnsupportedOperationError,
)
from canopy.models.algorithms import build_model
from canopy.models.algorithms.bagging import BaggingModel, bootstrap_indices
from canopy.models.algorithms.base import BaseModel
from canopy.models.algorithms.decision_tree import DecisionTreeModel
from canopy.models.algorithms.knn import KNNModel


class _ConstantModel(BaseModel):
    """总是预测同一标签的占位模型。"""

    def __init__(self, label: int = 0) -> None:
        super().__init__(label=label)
        self.label = label

    def fit(self, X: Any, y: Optional[Any] = None) -> "_ConstantModel":
        return self

    def predict(self, X: Any) -> np.ndarray:
        return np.full(len(X), self.label, dtype=np.int64)


class _AlwaysFailingModel(_ConstantModel):
    def fit(self, X: Any, y: Optional[Any] = None) -> "_AlwaysFailingModel":
        raise RuntimeError("boom")


class _FailsOnceModel(_ConstantModel):
    """首次训练失败，之后的克隆均训练成功。"""

    calls = 0
    lock = threading.Lock()

    def fit(self, X: Any, y: Optional[Any] = None) -> "_FailsOnceModel":
        with type(self).lock:
            type(self).calls += 1
            first = type(self).calls == 1
        if first:
            raise RuntimeError("first bag fails")
        return self


def _dataset(seed: int = 0) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(120, 4))
    y = (X[:, 0] - X[:, 2] > 0).astype(int) + (X[:, 1] > 1).astype(int)
    return X, y


def test_bootstrap_size_rounds_half_up_and_keeps_one_row() -> None:
    rng = np.random.default_rng(0)

    assert bootstrap_indices(10, 0.25, rng).shape == (3,)
    assert bootstrap_indices(10, 1.0, rng).shape == (10,)
    assert bootstrap_indices(10, 0.01, rng).shape == (1,)
    assert bootstrap_indices(10, 1.0, rng).max() < 10


def test_fit_trains_one_learner_per_bag() -> None:
    X, y = _dataset()
    bagging = BaggingModel(DecisionTreeModel(max_depth=3), n_bags=6, random_state=0)

    bagging.fit(X, y)

    assert len(bagging.estimators_) == 6
    assert bagging.failed_bags_ == []
    assert bagging.predict(X).shape == (120,)


def test_prototype_is_never_trained() -> None:
    X, y = _dataset()
    prototype = DecisionTreeModel()

    BaggingModel(prototype, n_bags=3, random_state=0).fit(X, y)

    assert prototype.root_ is None


def test_plurality_vote_over_three_learners() -> None:
    """三个学习器预测 1、2、1 时多数票为 1。"""

    bagging = BaggingModel(_ConstantModel(), n_bags=3)
    bagging.estimators_ = [_ConstantModel(1), _ConstantModel(2), _ConstantModel(1)]

    np.testing.assert_array_equal(bagging.predict([[0.0], [1.0]]), [1, 1])


def test_vote_ties_resolve_to_lowest_label_regardless_of_order() -> None:
    bagging = BaggingModel(_ConstantModel(), n_bags=2)

    bagging.estimators_ = [_ConstantModel(2), _ConstantModel(1)]
    first = bagging.predict([[0.0]])
    bagging.estimators_ = [_ConstantModel(1), _ConstantModel(2)]
    second = bagging.predict([[0.0]])

    np.testing.assert_array_equal(first, [1])
    np.testing.assert_array_equal(second, [1])


def test_results_do_not_depend_on_worker_count() -> None:
    """相同随机种子下，单线程与多线程训练的预测结果一致。"""

    X, y = _dataset(1)
    serial = BaggingModel(DecisionTreeModel(n_features=2), n_bags=8, random_state=5, n_workers=1)
    threaded = BaggingModel(DecisionTreeModel(n_features=2), n_bags=8, random_state=5, n_workers=4)

    serial.fit(X, y)
    threaded.fit(X, y)

    np.testing.assert_array_equal(serial.predict(X), threaded.predict(X))


def test_refit_with_same_seed_is_reproducible() -> None:
    X, y = _dataset(2)
    bagging = BaggingModel(DecisionTreeModel(n_features="sqrt"), n_bags=5, sample_fraction=0.7, random_state=9)

    first = bagging.fit(X, y).predict(X)
    second = bagging.fit(X, y).predict(X)

    np.testing.assert_array_equal(first, second)
    assert len(bagging.estimators_) == 5


def test_single_failed_bag_is_isolated() -> None:
    """单个袋训练失败只会减少学习器数量。"""

    _FailsOnceModel.calls = 0
    X, y = _dataset()
    bagging = BaggingModel(_FailsOnceModel(1), n_bags=4, random_state=0, n_workers=2)

    bagging.fit(X, y)

    assert len(bagging.estimators_) == 3
    assert len(bagging.failed_bags_) == 1
    assert "first bag fails" in bagging.failed_bags_[0][1]
    np.testing.assert_array_equal(bagging.predict(X[:3]), [1, 1, 1])


def test_all_bags_failing_raises() -> None:
    X, y = _dataset()
    bagging = BaggingModel(_AlwaysFailingModel(), n_bags=3, random_state=0)

    with pytest.raises(NoLearnersTrainedError):
        bagging.fit(X, y)
    assert bagging.estimators_ == []
    assert len(bagging.failed_bags_) == 3


def test_predict_before_fit_raises() -> None:
    with pytest.raises(UnfittedModelError):
        BaggingModel(DecisionTreeModel()).predict([[0.0]])


def test_clone_and_unlabeled_fit_are_unsupported() -> None:
    bagging = BaggingModel(DecisionTreeModel(), n_bags=2)

    with pytest.raises(UnsupportedOperationError):
        bagging.clone()
    with pytest.raises(UnsupportedOperationError):
        bagging.fit([[0.0], [1.0]])


@pytest.mark.parametrize(
    "params",
    [{"n_bags": 0}, {"sample_fraction": 0.0}, {"sample_fraction": 1.5}, {"n_workers": 0}],
)
def test_invalid_configuration_is_rejected(params) -> None:
    with pytest.raises(InvalidInputError):
        BaggingModel(DecisionTreeModel(), **params)


def test_prototype_must_be_a_model() -> None:
    with pytest.raises(InvalidInputError):
        BaggingModel(object())


def test_build_model_supports_nested_prototype() -> None:
    """配置中嵌套的 ``model`` 映射应被递归构建为原型模型。"""

    bagging = build_model(
        {
            "name": "bagging",
            "params": {"model": {"name": "knn", "params": {"k": 1}}, "n_bags": 3, "random_state": 0},
        }
    )

    assert isinstance(bagging, BaggingModel)
    assert isinstance(bagging.model, KNNModel)
    X, y = _dataset()
    assert bagging.fit(X, y).predict(X).shape == (120,)


def test_same_seed_draws_identical_bootstrap_samples() -> None:
    """相同种子下每个袋的自助样本逐行一致，且与线程数无关。"""

    X, y = _dataset(3)
    serial = BaggingModel(DecisionTreeModel(), n_bags=6, sample_fraction=0.5, random_state=21, n_workers=1)
    threaded = BaggingModel(DecisionTreeModel(), n_bags=6, sample_fraction=0.5, random_state=21, n_workers=3)

    serial.fit(X, y)
    threaded.fit(X, y)

    assert sorted(serial.bootstrap_samples_) == list(range(6))
    for bag_index, seed in enumerate(np.random.SeedSequence(21).spawn(6)):
        sample_seed, _ = seed.spawn(2)
        expected = bootstrap_indices(120, 0.5, np.random.default_rng(sample_seed))
        np.testing.assert_array_equal(serial.bootstrap_samples_[bag_index], expected)
        np.testing.assert_array_equal(threaded.bootstrap_samples_[bag_index], expected)
        assert expected.shape == (60,)


def test_failed_bags_record_no_bootstrap_sample() -> None:
    X, y = _dataset()
    bagging = BaggingModel(_AlwaysFailingModel(), n_bags=2, random_state=0)

    with pytest.raises(NoLearnersTrainedError):
        bagging.fit(X, y)
    assert bagging.bootstrap_samples_ == {}


def test_vote_with_large_label_values() -> None:
    """标签取值很大时，投票只按不同标签个数计数。"""

    X, y = _dataset()
    sparse_y = np.where(y > 0, 5_000_000, 0)
    bagging = BaggingModel(DecisionTreeModel(max_depth=3), n_bags=3, random_state=0)

    predictions = bagging.fit(X, sparse_y).predict(X)

    assert predictions.shape == (120,)
    assert set(np.unique(predictions)) <= {0, 5_000_000}
