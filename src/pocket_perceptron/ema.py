"""Exponential moving average state shared by the classifier statistics.

All recurrences use the smoothing factor ``alpha = 2 / (window + 1)``, where
``window`` is roughly the number of recent examples the average remembers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import threading

from .linear_model import POSITIVE_LABEL

DEFAULT_WINDOW = 100


def smoothing_factor(window: int) -> float:
    """Return the EMA smoothing factor for a window of ``window`` examples."""

    if window < 1:
        raise ValueError("window must be a positive integer")
    return 2.0 / (window + 1.0)


class ClassBalance:
    """EMA estimates of how many positives and negatives were seen recently.

    Each classifier owns one by default. To share class-balance estimates
    across classifiers, pass the same instance to each of them; updates are
    then serialized through the instance lock.
    """

    def __init__(self, positive: float = 1.0, negative: float = 1.0) -> None:
        self._positive = positive
        self._negative = negative
        self._lock = threading.Lock()

    @property
    def positive(self) -> float:
        return self._positive

    @property
    def negative(self) -> float:
        return self._negative

    def update(self, label: int, alpha: float) -> None:
        """Bump the count of ``label``'s class and decay the other one."""

        decay = 1.0 - alpha
        with self._lock:
            if label == POSITIVE_LABEL:
                self._positive = 1.0 + decay * self._positive
                self._negative = decay * self._negative
            else:
                self._positive = decay * self._positive
                self._negative = 1.0 + decay * self._negative

    def restore(self, positive: float, negative: float) -> None:
        with self._lock:
            self._positive = positive
            self._negative = negative


@dataclass
class EmaState:
    """Moving averages driven by the classifier on every training step.

    Attributes:
        window: Configured EMA window.
        alpha: Smoothing factor derived from ``window``.
        error: EMA of the misclassification indicator.
        balance: Positive/negative class count estimates.
        score_pos: EMA of model scores on positive examples.
        score_neg: EMA of model scores on negative examples.
    """

    window: int = DEFAULT_WINDOW
    alpha: float = field(init=False)
    error: float = 0.0
    balance: ClassBalance = field(default_factory=ClassBalance)
    score_pos: float = 0.0
    score_neg: float = 0.0
    _seen_pos: bool = field(default=False, init=False, repr=False)
    _seen_neg: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        self.alpha = smoothing_factor(self.window)

    def set_window(self, window: int) -> None:
        self.alpha = smoothing_factor(window)
        self.window = window

    def update_error(self, mistake: bool) -> None:
        if mistake:
            self.error = self.alpha + (1.0 - self.alpha) * self.error
        else:
            self.error = (1.0 - self.alpha) * self.error

    def update_counts(self, label: int) -> None:
        self.balance.update(label, self.alpha)

    def update_class_score(self, label: int, score: float) -> None:
        """Track the running model score for ``label``'s class.

        The first score seen for a class initializes its average. Note the
        weighting is ``alpha * old + (1 - alpha) * new``, so recent scores
        dominate this average.
        """

        if label == POSITIVE_LABEL:
            if not self._seen_pos:
                self.score_pos = score
                self._seen_pos = True
            else:
                self.score_pos = self.alpha * self.score_pos + (1.0 - self.alpha) * score
        else:
            if not self._seen_neg:
                self.score_neg = score
                self._seen_neg = True
            else:
                self.score_neg = self.alpha * self.score_neg + (1.0 - self.alpha) * score
