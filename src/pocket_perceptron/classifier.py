"""Pocket perceptron trained online, one example at a time.

Each call to :meth:`PocketPerceptronClassifier.train` runs one predict/update
cycle:

  1. Update the per-class score averages with the current model score.
  2. Score the example and threshold the score against the bias.
  3. Record the outcome in the confusion matrix and pocket counters.
  4. On a mistake, move the weights by ``eta * (y - y_hat) * x``.
  5. Nudge the adaptive threshold toward the target precision.
  6. Refresh the error, class-count and AUC moving averages.

The order of examples matters: every moving average and the pocket streak are
functions of the sequence, so callers must feed examples in a fixed order
(typically chronological).
"""

from __future__ import annotations

from pathlib import Path

import logging

from .auc import AucEstimator
from .config import ClassifierConfig
from .ema import ClassBalance, EmaState
from .errors import ThresholdManagedError, UnsupportedOperationError
from .linear_model import NEGATIVE_LABEL, POSITIVE_LABEL, Example, SparseLinearModel
from .persistence import CheckpointRecord, current_timestamp, load_checkpoint, read_checkpoint, save_checkpoint
from .statistics import ConfusionCounts, PocketCounters, format_confusion_matrix
from .threshold import ThresholdController

logger = logging.getLogger(__name__)


class PocketPerceptronClassifier:
    """Online binary linear classifier with adaptive-threshold bookkeeping."""

    def __init__(
        self,
        config: ClassifierConfig | None = None,
        model: SparseLinearModel | None = None,
        balance: ClassBalance | None = None,
    ) -> None:
        """Create a classifier.

        Args:
            config: Hyperparameters; defaults to :class:`ClassifierConfig`.
            model: Initial model; defaults to empty weights and zero bias.
            balance: Class-count estimates. Pass the same object to several
                classifiers to share them; by default each instance owns one.
        """

        config = config or ClassifierConfig()
        self._model = model or SparseLinearModel()
        self._learning_rate = config.learning_rate
        self._adaptive_learning_rate = config.adaptive_learning_rate
        self._threshold_in_decision = config.threshold_in_decision
        self._ema = EmaState(window=config.ema_window, balance=balance or ClassBalance())
        self._auc = AucEstimator(window=config.ema_window)
        self._threshold = ThresholdController(
            target_precision=config.target_precision,
            step=config.threshold_step,
        )
        self._counts = ConfusionCounts()
        self._pocket = PocketCounters()
        self._total_processed = 0

    # Training and inference

    def train(self, example: Example) -> bool:
        """Run one training step on ``example``; return True if it was classified correctly."""

        model = self._model
        self._ema.update_class_score(example.label, model.score(example))

        y_hat = model.predict(example)
        example.predicted_score = y_hat
        predicted = POSITIVE_LABEL if y_hat > self.decision_boundary else NEGATIVE_LABEL
        example.predicted_label = predicted

        correct = self._counts.record(predicted, example.label)
        if correct:
            self._pocket.current.hit()
        else:
            self._pocket.current.miss()
            self._update_weights(example, predicted)
            logger.debug(
                "misclassified",
                extra={"label": example.label, "score": y_hat, "processed": self._total_processed},
            )

        self._threshold.adapt(self._counts.precision)
        self._ema.update_error(not correct)
        self._ema.update_counts(example.label)
        self._auc.observe(example.label, y_hat)
        self._total_processed += 1
        return correct

    def _update_weights(self, example: Example, predicted: int) -> None:
        eta = self._learning_rate
        if self._adaptive_learning_rate:
            # Rarer classes get larger steps: scale by the other class's count.
            balance = self._ema.balance
            eta *= balance.negative if example.label == POSITIVE_LABEL else balance.positive
        delta = eta * (example.label - predicted)
        scaled = {feature_id: value * delta for feature_id, value in example.features.items()}
        self._model.add_to_w(scaled, 0.0)

    def predict(self, example: Example) -> float:
        """Return the raw model score for ``example`` without changing any state."""

        return self._model.predict(example)

    @property
    def decision_boundary(self) -> float:
        """Score an example must exceed to be labelled positive."""

        if self._threshold_in_decision:
            return self._model.bias + self._threshold.threshold
        return self._model.bias

    # Statistics

    def precision(self) -> float:
        return self._counts.precision

    def recall(self) -> float:
        return self._counts.recall

    def confusion_counts(self) -> dict[str, int]:
        return self._counts.as_dict()

    def reset_confusion_counts(self) -> None:
        self._counts.reset()

    def format_confusion_matrix(self) -> str:
        return format_confusion_matrix(self._counts)

    def auc(self) -> float:
        return self._auc.value

    def error_ema(self) -> float:
        return self._ema.error

    def reset_error_ema(self) -> None:
        self._ema.error = 0.0

    def positive_count(self) -> float:
        return self._ema.balance.positive

    def negative_count(self) -> float:
        return self._ema.balance.negative

    @property
    def positive_score_average(self) -> float:
        return self._ema.score_pos

    @property
    def negative_score_average(self) -> float:
        return self._ema.score_neg

    @property
    def pocket_counters(self) -> PocketCounters:
        return self._pocket

    @property
    def total_processed(self) -> int:
        return self._total_processed

    def increment_total_processed(self, count: int) -> None:
        if count < 0:
            raise ValueError("count must be non-negative")
        self._total_processed += count

    # Configuration

    @property
    def model(self) -> SparseLinearModel:
        return self._model

    @property
    def bias(self) -> float:
        return self._model.bias

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    def set_learning_rate(self, learning_rate: float) -> None:
        if learning_rate <= 0:
            raise ValueError("learning_rate must be positive")
        self._learning_rate = learning_rate

    @property
    def adaptive_learning_rate(self) -> bool:
        return self._adaptive_learning_rate

    def set_adaptive_learning_rate(self, enabled: bool) -> None:
        self._adaptive_learning_rate = enabled

    @property
    def target_precision(self) -> float | None:
        return self._threshold.target_precision

    def set_target_precision(self, target: float | None) -> None:
        """Set the precision the threshold chases; None disables adaptation."""

        if target is not None and not 0.0 <= target <= 1.0:
            raise ValueError("target precision must lie in [0, 1]")
        self._threshold.target_precision = target

    @property
    def threshold(self) -> float:
        return self._threshold.threshold

    @property
    def threshold_step(self) -> float:
        return self._threshold.step

    def set_threshold(self, threshold: float) -> None:
        raise ThresholdManagedError()

    def set_positive_margin(self, margin: float) -> None:
        raise UnsupportedOperationError("Positive margin is not implemented")

    def set_negative_margin(self, margin: float) -> None:
        raise UnsupportedOperationError("Negative margin is not implemented")

    @property
    def ema_window(self) -> int:
        return self._ema.window

    @property
    def ema_alpha(self) -> float:
        return self._ema.alpha

    @property
    def auc_alpha(self) -> float:
        return self._auc.alpha

    def set_ema_window(self, window: int) -> None:
        """Change the EMA window for the classifier and its AUC estimator."""

        self._ema.set_window(window)
        self._auc.reconfigure_window(window)

    # Persistence

    def checkpoint(self) -> CheckpointRecord:
        """Return a snapshot of every scalar in the classifier state."""

        return CheckpointRecord(
            timestamp=current_timestamp(),
            target_precision=self._threshold.target_precision,
            threshold=self._threshold.threshold,
            threshold_step=self._threshold.step,
            learning_rate=self._learning_rate,
            ema_window=self._ema.window,
            ema_error=self._ema.error,
            pos_count=self._ema.balance.positive,
            neg_count=self._ema.balance.negative,
            tp=self._counts.tp,
            fp=self._counts.fp,
            tn=self._counts.tn,
            fn=self._counts.fn,
            auc=self._auc.value,
            total_processed=self._total_processed,
        )

    def apply_checkpoint(self, record: CheckpointRecord) -> None:
        """Restore scalar state from ``record``."""

        self._auc.restore(record.auc)
        self._threshold.target_precision = record.target_precision
        self._threshold.threshold = record.threshold
        self._threshold.step = record.threshold_step
        self._learning_rate = record.learning_rate
        self.set_ema_window(record.ema_window)
        self._ema.error = record.ema_error
        self._ema.balance.restore(record.pos_count, record.neg_count)
        self._counts = ConfusionCounts(tp=record.tp, fp=record.fp, tn=record.tn, fn=record.fn)
        self._total_processed = record.total_processed

    def save_model(self, path: str | Path) -> None:
        self._model.save(path)

    def load_model(self, path: str | Path) -> None:
        self._model = SparseLinearModel.load(path)

    def save_checkpoint(self, path: str | Path) -> CheckpointRecord:
        return save_checkpoint(self, path)

    def load_checkpoint(self, path: str | Path) -> CheckpointRecord | None:
        return load_checkpoint(self, path)

    def save(self, prefix: str | Path) -> None:
        """Write ``<prefix>.model`` and append to ``<prefix>.log``."""

        prefix = str(prefix)
        self.save_model(prefix + ".model")
        self.save_checkpoint(prefix + ".log")

    def restore(self, prefix: str | Path) -> CheckpointRecord | None:
        """Load ``<prefix>.model`` and ``<prefix>.log``; missing files keep defaults."""

        prefix = str(prefix)
        # Parse both files before touching any state.
        model = SparseLinearModel.load(prefix + ".model")
        record = read_checkpoint(prefix + ".log")
        self._model = model
        if record is not None:
            self.apply_checkpoint(record)
            logger.info("state_restored", extra={"prefix": prefix, "total_processed": record.total_processed})
        return record
