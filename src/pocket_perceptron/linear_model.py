"""Sparse linear model used by the online classifier.

Weights are stored in a plain dict keyed by integer feature id. A missing key
is an implicit zero weight, so scoring only touches the features present in
both the example and the model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import logging

from .persistence import read_weights, write_weights

logger = logging.getLogger(__name__)

POSITIVE_LABEL = 1
NEGATIVE_LABEL = -1


@dataclass
class Example:
    """One labelled training example.

    Attributes:
        features: Sparse feature map from feature id to value.
        label: True label, either +1 or -1.
        predicted_score: Raw model score, filled in by the classifier.
        predicted_label: Thresholded decision, filled in by the classifier.
    """

    features: dict[int, float]
    label: int
    predicted_score: float | None = None
    predicted_label: int | None = None

    def __post_init__(self) -> None:
        if self.label not in (POSITIVE_LABEL, NEGATIVE_LABEL):
            raise ValueError(f"label must be +1 or -1, got {self.label!r}")


@dataclass
class SparseLinearModel:
    """Weight vector plus scalar bias.

    The bias is kept alongside the weights but is not folded into
    :meth:`score`; callers compare the score against :attr:`bias` themselves.
    """

    weights: dict[int, float] = field(default_factory=dict)
    bias: float = 0.0

    def score(self, example: Example) -> float:
        """Return the dot product of the weights with the example features."""

        weights = self.weights
        total = 0.0
        for feature_id, value in example.features.items():
            weight = weights.get(feature_id)
            if weight is not None:
                total += weight * value
        return total

    def predict(self, example: Example) -> float:
        # Same as score: the bias is applied by the caller.
        return self.score(example)

    def get_bias(self) -> float:
        return self.bias

    def add_to_w(self, delta: Mapping[int, float], bias_delta: float) -> None:
        """Add ``delta`` to the weights and ``bias_delta`` to the bias.

        This is the only way the model is mutated during training. Features
        missing from the model are created.
        """

        weights = self.weights
        for feature_id, value in delta.items():
            weights[feature_id] = weights.get(feature_id, 0.0) + value
        self.bias += bias_delta

    def nonzero_weights(self) -> dict[int, float]:
        return {feature_id: value for feature_id, value in self.weights.items() if value != 0.0}

    def save(self, path: str | Path) -> None:
        write_weights(path, self.weights, self.bias)
        logger.info("model_saved", extra={"path": str(path), "features": len(self.nonzero_weights())})

    @classmethod
    def load(cls, path: str | Path) -> "SparseLinearModel":
        """Load a model from ``path``; a missing file yields an empty model."""

        path = Path(path)
        if not path.exists():
            logger.info("model_missing", extra={"path": str(path)})
            return cls()
        weights, bias = read_weights(path)
        logger.info("model_loaded", extra={"path": str(path), "features": len(weights)})
        return cls(weights=weights, bias=bias)
