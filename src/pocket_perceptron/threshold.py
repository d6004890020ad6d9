"""Fixed-step decision threshold controller aimed at a target precision."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_THRESHOLD_STEP = 1e-5


def update_threshold(threshold: float, precision: float, target_precision: float, step: float) -> float:
    """Move ``threshold`` one ``step`` toward the target precision.

    The threshold rises while precision is below target and falls otherwise.
    There is no clamping.
    """

    if precision < target_precision:
        return threshold + step
    return threshold - step


@dataclass
class ThresholdController:
    """Hold the adaptive threshold and its configuration.

    ``target_precision`` of ``None`` disables adaptation.
    """

    target_precision: float | None = None
    step: float = DEFAULT_THRESHOLD_STEP
    threshold: float = 0.0

    def __post_init__(self) -> None:
        if self.step < 0:
            raise ValueError("threshold step must be non-negative")
        if self.target_precision is not None and not 0.0 <= self.target_precision <= 1.0:
            raise ValueError("target precision must lie in [0, 1]")

    @property
    def enabled(self) -> bool:
        return self.target_precision is not None

    def adapt(self, precision: float) -> float:
        if self.target_precision is not None:
            self.threshold = update_threshold(self.threshold, precision, self.target_precision, self.step)
        return self.threshold
