"""Online AUC estimate from the most recent positive and negative scores."""

from __future__ import annotations

from .ema import DEFAULT_WINDOW, smoothing_factor


class AucEstimator:
    """Moving-average approximation of the area under the ROC curve.

    After every example the estimator compares the latest positive score with
    the latest negative score. The EMA of "positive ranked above negative" is
    the AUC estimate; it stays in [0, 1] because the indicator is 0 or 1.
    """

    def __init__(self, window: int = DEFAULT_WINDOW, value: float = 0.0) -> None:
        self._alpha = smoothing_factor(window)
        self._value = value
        self._last_pos: float | None = None
        self._last_neg: float | None = None

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def value(self) -> float:
        return self._value

    @property
    def last_positive_score(self) -> float | None:
        return self._last_pos

    @property
    def last_negative_score(self) -> float | None:
        return self._last_neg

    def reconfigure_window(self, window: int) -> None:
        self._alpha = smoothing_factor(window)

    def restore(self, value: float) -> None:
        if not 0.0 <= value <= 1.0:
            raise ValueError("AUC estimate must lie in [0, 1]")
        self._value = value

    def observe(self, label: int, score: float) -> float:
        """Record ``score`` for ``label``'s class and return the new estimate."""

        if label >= 0:
            self._last_pos = score
        else:
            self._last_neg = score
        # Until both classes have been seen the pair cannot be ranked.
        ranked = (
            self._last_pos is not None
            and self._last_neg is not None
            and self._last_pos > self._last_neg
        )
        # Clamp away rounding drift above 1.
        self._value = min(1.0, self._alpha * float(ranked) + (1.0 - self._alpha) * self._value)
        return self._value
