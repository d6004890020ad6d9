"""Confusion matrix and pocket counters tracked during training."""

from __future__ import annotations

from dataclasses import dataclass, field

from .linear_model import POSITIVE_LABEL


@dataclass
class ConfusionCounts:
    """Tally of classification outcomes against ground truth."""

    tp: int = 0
    fp: int = 0
    tn: int = 0
    fn: int = 0

    def record(self, predicted: int, actual: int) -> bool:
        """Increment exactly one counter; return True if ``predicted`` was correct."""

        if predicted == actual:
            if predicted == POSITIVE_LABEL:
                self.tp += 1
            else:
                self.tn += 1
            return True
        if predicted == POSITIVE_LABEL:
            self.fp += 1
        else:
            self.fn += 1
        return False

    def reset(self) -> None:
        self.tp = self.fp = self.tn = self.fn = 0

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.tn + self.fn

    @property
    def precision(self) -> float:
        # No positive predictions yet counts as perfect precision.
        predicted_positive = self.tp + self.fp
        if predicted_positive == 0:
            return 1.0
        return self.tp / predicted_positive

    @property
    def recall(self) -> float:
        actual_positive = self.tp + self.fn
        if actual_positive == 0:
            return 1.0
        return self.tp / actual_positive

    def as_dict(self) -> dict[str, int]:
        return {"TP": self.tp, "FP": self.fp, "TN": self.tn, "FN": self.fn}


def format_confusion_matrix(counts: ConfusionCounts) -> str:
    """Render the confusion matrix as a small tab-separated table."""

    lines = [
        "\t\tActual class",
        "\t\tP\tN",
        f"Pred.P\t{counts.tp}\t{counts.fp}",
        f"Pred.N\t{counts.fn}\t{counts.tn}",
    ]
    return "\n".join(lines)


@dataclass
class PocketRun:
    """Consecutive-correct streak and total-correct count for one weight lineage."""

    streak: int = 0
    total_correct: int = 0

    def hit(self) -> None:
        self.streak += 1
        self.total_correct += 1

    def miss(self) -> None:
        self.streak = 0


@dataclass
class PocketCounters:
    """Pocket bookkeeping for the current weights and the pocket weights.

    Only ``current`` is updated during training; ``pocket`` is never promoted.
    """

    current: PocketRun = field(default_factory=PocketRun)
    pocket: PocketRun = field(default_factory=PocketRun)
