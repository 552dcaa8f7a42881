"""决策树模块，基于信息增益递归生成二叉分类树。"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

import numpy as np
from loguru import logger

from canopy.exceptions import CorruptTreeError, InvalidInputError
from canopy.utils.counter import most_common
from canopy.utils.validation import check_features, check_fit_input

from .base import BaseModel
from .registry import register_model


@dataclass
class LeafNode:
    """Terminal node holding the majority label of the rows that reached it."""

    value: int

    def is_leaf(self) -> bool:
        return True


@dataclass
class SplitNode:
    """Internal node: rows with ``row[feature] <= threshold`` go left."""

    feature: int
    threshold: float
    left: "Node"
    right: "Node"

    def is_leaf(self) -> bool:
        return False


Node = Union[LeafNode, SplitNode]


def entropy(labels: Sequence[int] | np.ndarray) -> float:
    """Shannon entropy (base 2) of a label vector; empty input has entropy 0.

    中文说明：按标签分布计算以 2 为底的熵，单一类别时结果恰为 0。
    """

    values = np.asarray(labels, dtype=np.int64)
    if values.size == 0:
        return 0.0
    _, counts = np.unique(values, return_counts=True)
    probs = counts / values.size
    return max(0.0, float(-np.sum(probs * np.log2(probs))))


def information_gain(
    parent: Sequence[int] | np.ndarray,
    left: Sequence[int] | np.ndarray,
    right: Sequence[int] | np.ndarray,
) -> float:
    """Entropy reduction obtained by splitting ``parent`` into ``left``/``right``."""

    total = len(parent)
    if total == 0:
        return 0.0
    weighted = (len(left) / total) * entropy(left) + (len(right) / total) * entropy(right)
    return entropy(parent) - weighted


def _copy_tree(root: Node) -> Node:
    """Node-by-node copy of a tree, without recursion."""

    if root.is_leaf():
        return LeafNode(root.value)
    new_root = SplitNode(root.feature, root.threshold, None, None)
    stack = [(root, new_root)]
    while stack:
        source, target = stack.pop()
        for side in ("left", "right"):
            child = getattr(source, side)
            if child.is_leaf():
                setattr(target, side, LeafNode(child.value))
            else:
                twin = SplitNode(child.feature, child.threshold, None, None)
                setattr(target, side, twin)
                stack.append((child, twin))
    return new_root


def _entropy_from_counts(counts: np.ndarray) -> np.ndarray:
    """Row-wise entropy of a ``(n_candidates, n_classes)`` count matrix."""

    totals = counts.sum(axis=1, keepdims=True)
    probs = np.divide(counts, totals, out=np.zeros_like(counts), where=totals > 0)
    logs = np.log2(probs, out=np.zeros_like(probs), where=probs > 0)
    return -np.sum(probs * logs, axis=1)


def _best_threshold(
    column: np.ndarray, encoded: np.ndarray, n_classes: int, parent_entropy: float
) -> Optional[Tuple[float, float]]:
    """Score every distinct value of ``column`` as a ``<=`` threshold.

    中文说明：列只排序一次，借助累计类别计数一次性算出所有候选阈值的信息增益；
    最大取值会使右侧为空，因此不参与比较。返回 ``(gain, threshold)``，
    并列时取最小阈值。
    """

    n_samples = column.shape[0]
    order = np.argsort(column, kind="stable")
    sorted_values = column[order]
    # 中文说明：每个不同取值最后一次出现的位置即为一个候选切分点。
    boundaries = np.nonzero(sorted_values[:-1] != sorted_values[1:])[0]
    if boundaries.size == 0:
        return None

    onehot = np.zeros((n_samples, n_classes), dtype=float)
    onehot[np.arange(n_samples), encoded[order]] = 1.0
    cumulative = np.cumsum(onehot, axis=0)

    left_counts = cumulative[boundaries]
    right_counts = cumulative[-1] - left_counts
    n_left = (boundaries + 1).astype(float)
    n_right = n_samples - n_left
    gains = (
        parent_entropy
        - (n_left / n_samples) * _entropy_from_counts(left_counts)
        - (n_right / n_samples) * _entropy_from_counts(right_counts)
    )
    best = int(np.argmax(gains))
    return float(gains[best]), float(sorted_values[boundaries[best]])


@register_model("decision_tree")
class DecisionTreeModel(BaseModel):
    """Binary classification tree grown by information gain.

    中文说明：递归地在候选特征的每个取值上尝试 ``<=`` 切分，选择信息增益最大者；
    设置 ``n_features`` 后每次切分只随机考察部分特征，即随机森林中的单棵树。

    Parameters
    ----------
    min_samples_split:
        Nodes with fewer rows become leaves.
    max_depth:
        Maximum depth; ``None`` grows until the leaves are pure.
    n_features:
        Features considered per split: an int, ``"sqrt"``, ``"log2"`` or
        ``None`` for every feature.
    random_state:
        Seed of the feature-subsampling generator.
    """

    _FEATURE_RULES = {"sqrt", "log2"}

    def __init__(
        self,
        min_samples_split: int = 2,
        max_depth: Optional[int] = 100,
        n_features: Optional[int | str] = None,
        random_state: Any = None,
    ) -> None:
        if not isinstance(min_samples_split, numbers.Integral) or min_samples_split < 1:
            raise InvalidInputError("min_samples_split must be an integer >= 1")
        if max_depth is not None and (not isinstance(max_depth, numbers.Integral) or max_depth < 0):
            raise InvalidInputError("max_depth must be an integer >= 0 or None")
        if isinstance(n_features, str):
            if n_features not in self._FEATURE_RULES:
                raise InvalidInputError(f"Unknown n_features rule: {n_features}")
        elif n_features is not None and (not isinstance(n_features, numbers.Integral) or n_features < 1):
            raise InvalidInputError("n_features must be an integer >= 1, 'sqrt', 'log2' or None")

        super().__init__(
            min_samples_split=min_samples_split,
            max_depth=max_depth,
            n_features=n_features,
            random_state=random_state,
        )
        self.min_samples_split = min_samples_split
        self.max_depth = max_depth
        self.n_features = n_features
        self.random_state = random_state
        self.root_: Optional[Node] = None
        self.n_features_in_: Optional[int] = None
        self._rng: Optional[np.random.Generator] = None

    def set_random_state(self, random_state: Any) -> None:
        self.random_state = random_state
        self.params["random_state"] = random_state

    def fit(self, X: Any, y: Optional[Any] = None) -> "DecisionTreeModel":
        """Grow the tree from the full training set.

        中文说明：先校验输入，再从深度 0 开始逐层生长；重新训练会整体替换根节点。
        """

        self._reject_unlabeled(y)
        features, labels = check_fit_input(X, y)
        self._rng = np.random.default_rng(self.random_state)
        self.n_features_in_ = features.shape[1]
        self.root_ = self._grow_tree(features, labels)
        logger.debug(
            "Fitted decision tree on {} rows: depth={}, leaves={}",
            features.shape[0],
            self.depth(),
            self.n_leaves(),
        )
        return self

    def predict(self, X: Any) -> np.ndarray:
        """Route every row from the root down to a leaf label."""

        self._check_is_fitted("root_")
        features = check_features(X)
        if features.shape[1] != self.n_features_in_:
            raise InvalidInputError(
                f"X has {features.shape[1]} features, but the tree was fitted with {self.n_features_in_}"
            )
        return np.fromiter(
            (self._traverse(row) for row in features),
            dtype=np.int64,
            count=features.shape[0],
        )

    def clone(self) -> "DecisionTreeModel":
        """Copy the configuration and, if fitted, the whole tree.

        中文说明：节点逐个复制而不借助 ``copy.deepcopy``，很深的树也不会触发递归上限。
        """

        twin = DecisionTreeModel(**self.get_params())
        if self.root_ is not None:
            twin.root_ = _copy_tree(self.root_)
            twin.n_features_in_ = self.n_features_in_
        return twin

    def depth(self) -> int:
        """Depth of the fitted tree (a single leaf has depth 0)."""

        self._check_is_fitted("root_")
        deepest = 0
        stack = [(self.root_, 0)]
        while stack:
            node, level = stack.pop()
            if node.is_leaf():
                deepest = max(deepest, level)
            else:
                stack.append((node.left, level + 1))
                stack.append((node.right, level + 1))
        return deepest

    def n_leaves(self) -> int:
        """Number of leaves of the fitted tree."""

        self._check_is_fitted("root_")
        count = 0
        stack = [self.root_]
        while stack:
            node = stack.pop()
            if node.is_leaf():
                count += 1
            else:
                stack.extend((node.left, node.right))
        return count

    def _grow_tree(self, X: np.ndarray, y: np.ndarray) -> Node:
        """Build the tree depth-first with an explicit stack.

        中文说明：栈中保存 ``(行索引, 深度, 父节点, 左/右)``；先弹出左子树，
        随机特征抽样的消耗顺序与递归前序遍历一致。
        """

        root: Optional[Node] = None
        stack = [(np.arange(y.shape[0]), 0, None, "left")]
        while stack:
            rows, depth, parent, side = stack.pop()
            node, mask = self._split_node(X[rows], y[rows], depth)
            if parent is None:
                root = node
            else:
                setattr(parent, side, node)
            if mask is not None:
                stack.append((rows[~mask], depth + 1, node, "right"))
                stack.append((rows[mask], depth + 1, node, "left"))
        return root

    def _split_node(
        self, X: np.ndarray, y: np.ndarray, depth: int
    ) -> Tuple[Node, Optional[np.ndarray]]:
        """Return a leaf, or an unfilled split node with its left-side row mask."""

        n_samples = y.shape[0]
        classes, encoded = np.unique(y, return_inverse=True)

        if (
            (self.max_depth is not None and depth >= self.max_depth)
            or classes.size == 1
            or n_samples < self.min_samples_split
        ):
            return LeafNode(most_common(y)), None

        parent_entropy = entropy(y)
        best_gain = -1.0
        best_feature: Optional[int] = None
        best_threshold = 0.0
        for feature in self._select_features(X.shape[1]):
            candidate = _best_threshold(X[:, feature], encoded, classes.size, parent_entropy)
            if candidate is None:
                continue
            gain, threshold = candidate
            # 中文说明：严格大于才替换，保证并列时保留特征序号与阈值更小的切分。
            if gain > best_gain:
                best_gain = gain
                best_feature = int(feature)
                best_threshold = threshold

        if best_feature is None:
            return LeafNode(most_common(y)), None

        mask = X[:, best_feature] <= best_threshold
        return SplitNode(best_feature, best_threshold, None, None), mask

    def _select_features(self, total: int) -> np.ndarray:
        """Pick the candidate columns for one split, in ascending order."""

        if self.n_features is None:
            k = total
        elif self.n_features == "sqrt":
            k = max(1, int(math.sqrt(total)))
        elif self.n_features == "log2":
            k = max(1, int(math.log2(total)))
        else:
            k = min(int(self.n_features), total)

        if k >= total:
            return np.arange(total)
        return np.sort(self._rng.choice(total, size=k, replace=False))

    def _traverse(self, row: np.ndarray) -> int:
        node = self.root_
        while not node.is_leaf():
            if node.feature < 0 or node.feature >= row.shape[0]:
                raise CorruptTreeError(
                    f"Invalid feature index {node.feature} for a row with {row.shape[0]} features"
                )
            node = node.left if row[node.feature] <= node.threshold else node.right
        return node.value


__all__ = [
    "DecisionTreeModel",
    "LeafNode",
    "SplitNode",
    "entropy",
    "information_gain",
]
