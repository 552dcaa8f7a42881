"""Bagging 集成模块，并行训练多个自助采样学习器并以多数投票聚合预测。"""

from __future__ import annotations

import math
import numbers
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from joblib import Parallel, delayed
from loguru import logger

from canopy.exceptions import (
    InvalidInputError,
    NoLearnersTrainedError,
    UnfittedModelError,
    UnsupportedOperationError,
)
from canopy.utils.counter import plurality_vote
from canopy.utils.validation import check_features, check_fit_input

from .base import BaseModel
from .registry import register_model


def bootstrap_indices(n_samples: int, sample_fraction: float, rng: np.random.Generator) -> np.ndarray:
    """Draw ``round(n_samples * sample_fraction)`` row indices with replacement.

    中文说明：采用四舍五入（0.5 进位）确定自助样本量，且至少抽取一行。
    """

    size = max(1, int(math.floor(n_samples * sample_fraction + 0.5)))
    return rng.integers(0, n_samples, size=size)


@register_model("bagging")
class BaggingModel(BaseModel):
    """Bootstrap aggregation over clones of a prototype model.

    中文说明：对原型模型进行 ``n_bags`` 次克隆，每个克隆在独立的自助样本上训练，
    训练任务通过 joblib 线程池并行执行；预测时逐行取多数票。

    Parameters
    ----------
    model:
        Prototype learner; it is only cloned, never trained itself.
    n_bags:
        Number of weak learners to train.
    sample_fraction:
        Bootstrap sample size as a fraction of the training rows, in (0, 1].
    random_state:
        Engine seed; every bag derives its own generator from it.
    n_workers:
        Size of the thread pool, defaults to ``n_bags``.
    """

    def __init__(
        self,
        model: BaseModel,
        n_bags: int = 10,
        sample_fraction: float = 1.0,
        random_state: Optional[int] = None,
        n_workers: Optional[int] = None,
    ) -> None:
        if not isinstance(model, BaseModel):
            raise InvalidInputError("model must be a BaseModel instance")
        if not isinstance(n_bags, numbers.Integral) or n_bags < 1:
            raise InvalidInputError("n_bags must be an integer >= 1")
        if not 0.0 < float(sample_fraction) <= 1.0:
            raise InvalidInputError("sample_fraction must lie in (0, 1]")
        if n_workers is not None and (not isinstance(n_workers, numbers.Integral) or n_workers < 1):
            raise InvalidInputError("n_workers must be an integer >= 1 or None")

        super().__init__(
            model=model,
            n_bags=n_bags,
            sample_fraction=sample_fraction,
            random_state=random_state,
            n_workers=n_workers,
        )
        self.model = model
        self.n_bags = int(n_bags)
        self.sample_fraction = float(sample_fraction)
        self.random_state = random_state
        self.n_workers = int(n_workers) if n_workers is not None else self.n_bags
        self.estimators_: List[BaseModel] = []
        self.failed_bags_: List[Tuple[int, str]] = []
        # 中文说明：袋序号到自助样本行索引的映射，仅记录训练成功的袋。
        self.bootstrap_samples_: Dict[int, np.ndarray] = {}

    def fit(self, X: Any, y: Optional[Any] = None) -> "BaggingModel":
        """Train ``n_bags`` clones on bootstrap samples, in parallel.

        中文说明：每个子任务拥有由 ``(random_state, 袋序号)`` 派生的独立随机数生成器，
        因此结果可复现且与线程调度无关；单个任务失败只会减少学习器数量，
        全部失败时抛出 ``NoLearnersTrainedError``。
        """

        self._reject_unlabeled(y)
        features, labels = check_fit_input(X, y)

        self.estimators_ = []
        self.failed_bags_ = []
        self.bootstrap_samples_ = {}

        bag_seeds = self._root_seed().spawn(self.n_bags)
        logger.info(
            "Training {} bags of {} with {} workers",
            self.n_bags,
            type(self.model).__name__,
            self.n_workers,
        )

        # 中文说明：线程池在每次 fit 时创建，迭代结束即销毁；结果按完成顺序返回。
        results = Parallel(
            n_jobs=self.n_workers,
            prefer="threads",
            return_as="generator_unordered",
        )(
            delayed(self._fit_bag)(bag_index, seed, features, labels)
            for bag_index, seed in enumerate(bag_seeds)
        )
        for bag_index, learner, indices, error in results:
            if learner is None:
                self.failed_bags_.append((bag_index, error))
            else:
                self.estimators_.append(learner)
                self.bootstrap_samples_[bag_index] = indices

        if not self.estimators_:
            logger.error("No weak learners were trained out of {} bags", self.n_bags)
            raise NoLearnersTrainedError(
                f"All {self.n_bags} bags failed to train; first error: {self.failed_bags_[0][1]}"
            )
        if self.failed_bags_:
            logger.warning(
                "{} of {} bags failed to train", len(self.failed_bags_), self.n_bags
            )
        return self

    def _fit_bag(
        self,
        bag_index: int,
        seed: np.random.SeedSequence,
        features: np.ndarray,
        labels: np.ndarray,
    ) -> Tuple[int, Optional[BaseModel], Optional[np.ndarray], Optional[str]]:
        """Bootstrap, clone and train one weak learner; never raises."""

        try:
            sample_seed, model_seed = seed.spawn(2)
            rng = np.random.default_rng(sample_seed)
            indices = bootstrap_indices(features.shape[0], self.sample_fraction, rng)
            learner = self.model.clone()
            learner.set_random_state(model_seed)
            learner.fit(features[indices], labels[indices])
        except Exception as exc:
            # 中文说明：在任务边界捕获异常，单个袋失败不影响其他并行任务。
            logger.error("Error during training weak learner {}: {!r}", bag_index, exc)
            return bag_index, None, None, repr(exc)
        logger.info("Successfully trained weak learner {}", bag_index)
        return bag_index, learner, indices, None

    def predict(self, X: Any) -> np.ndarray:
        """Per-row plurality vote over every weak learner (ties: lowest label)."""

        if not self.estimators_:
            raise UnfittedModelError("BaggingModel must be fitted before calling predict")
        features = check_features(X)
        predictions = np.vstack([learner.predict(features) for learner in self.estimators_])
        return plurality_vote(predictions)

    def set_random_state(self, random_state: Any) -> None:
        self.random_state = random_state
        self.params["random_state"] = random_state

    def _root_seed(self) -> np.random.SeedSequence:
        """Fresh root sequence so that repeated fits spawn identical children."""

        if isinstance(self.random_state, np.random.SeedSequence):
            return np.random.SeedSequence(
                entropy=self.random_state.entropy, spawn_key=self.random_state.spawn_key
            )
        return np.random.SeedSequence(self.random_state)

    def clone(self) -> BaseModel:
        logger.error("clone is not supported for BaggingModel")
        raise UnsupportedOperationError("clone is not supported for BaggingModel")


__all__ = ["BaggingModel", "bootstrap_indices"]
