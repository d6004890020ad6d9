"""Text codecs for model weights and classifier checkpoints.

Two files describe a trained classifier:

* the weight file, a header followed by one ``<id>\\t<weight>`` line per
  non-zero weight;
* the checkpoint log, a tab-separated line per save holding every scalar of
  the classifier state. Saves append, and the newest record wins on load.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Mapping

import logging
import time

from .errors import CheckpointFormatError, PersistenceError

if TYPE_CHECKING:
    from .classifier import PocketPerceptronClassifier

logger = logging.getLogger(__name__)

WEIGHTS_HEADER = "Vocabulary Format: <id>\t<value>"
BIAS_MARKER = "# bias"

CHECKPOINT_HEADER = "\t".join(
    [
        "Timestamp",
        "desPrec",
        "extra_bias",
        "change_thres",
        "eta",
        "EMAwin",
        "EMAerror",
        "N_pos",
        "N_neg",
        "TP",
        "FP",
        "TN",
        "FN",
        "AUC",
        "N_overall",
    ]
)

# Written in place of an unset target precision.
DISABLED_PRECISION = -1.0


@dataclass(frozen=True)
class CheckpointRecord:
    """Snapshot of every scalar in the classifier state.

    Field order matches the column order of the checkpoint log.
    """

    timestamp: int
    target_precision: float | None
    threshold: float
    threshold_step: float
    learning_rate: float
    ema_window: int
    ema_error: float
    pos_count: float
    neg_count: float
    tp: int
    fp: int
    tn: int
    fn: int
    auc: float
    total_processed: int

    def __post_init__(self) -> None:
        if self.target_precision is not None and not 0.0 <= self.target_precision <= 1.0:
            raise ValueError("target_precision must lie in [0, 1]")
        if self.threshold_step < 0:
            raise ValueError("threshold_step must be non-negative")
        if self.learning_rate <= 0:
            raise ValueError("learning_rate must be positive")
        if self.ema_window < 1:
            raise ValueError("ema_window must be a positive integer")
        if self.ema_error < 0 or self.pos_count < 0 or self.neg_count < 0:
            raise ValueError("moving averages must be non-negative")
        if min(self.tp, self.fp, self.tn, self.fn, self.total_processed) < 0:
            raise ValueError("counters must be non-negative")
        if not 0.0 <= self.auc <= 1.0:
            raise ValueError("auc must lie in [0, 1]")

    def to_line(self) -> str:
        values = list(astuple(self))
        if values[1] is None:
            values[1] = DISABLED_PRECISION
        return "\t".join(str(value) for value in values)

    @classmethod
    def from_line(cls, line: str, path: str = "<checkpoint>") -> "CheckpointRecord":
        tokens = [token.strip() for token in line.split("\t")]
        if len(tokens) != len(_PARSERS):
            raise CheckpointFormatError(path, f"expected {len(_PARSERS)} fields, found {len(tokens)}")
        values = []
        for name, parser, token in zip(_FIELD_NAMES, _PARSERS, tokens):
            try:
                values.append(parser(token))
            except ValueError as exc:
                raise CheckpointFormatError(path, f"field {name!r} has invalid value {token!r}") from exc
        if values[1] == DISABLED_PRECISION:
            values[1] = None
        try:
            return cls(*values)
        except ValueError as exc:
            raise CheckpointFormatError(path, str(exc)) from exc


_FIELD_NAMES = [item.name for item in fields(CheckpointRecord)]
_PARSERS: list[Callable[[str], float | int]] = [
    int,  # timestamp
    float,  # target_precision
    float,  # threshold
    float,  # threshold_step
    float,  # learning_rate
    int,  # ema_window
    float,  # ema_error
    float,  # pos_count
    float,  # neg_count
    int,  # tp
    int,  # fp
    int,  # tn
    int,  # fn
    float,  # auc
    int,  # total_processed
]


def current_timestamp() -> int:
    """Milliseconds since the epoch."""

    return int(time.time() * 1000)


def _is_numeric(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def write_weights(path: str | Path, weights: Mapping[int, float], bias: float = 0.0) -> None:
    """Write non-zero ``weights`` sorted by feature id."""

    lines = [WEIGHTS_HEADER]
    if bias != 0.0:
        lines.append(f"{BIAS_MARKER}\t{bias!r}")
    for feature_id in sorted(weights):
        value = weights[feature_id]
        if value != 0.0:
            lines.append(f"{feature_id}\t{value!r}")
    Path(path).write_text("\n".join(lines) + "\n")


def read_weights(path: str | Path) -> tuple[dict[int, float], float]:
    """Read a weight file written by :func:`write_weights`.

    Zero weights are dropped. Returns ``(weights, bias)``.
    """

    weights: dict[int, float] = {}
    bias = 0.0
    first = True
    for number, raw in enumerate(Path(path).read_text().splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        tokens = line.split("\t")
        if first:
            first = False
            if not _is_numeric(tokens[0]):
                # Header line.
                continue
        if tokens[0].strip() == BIAS_MARKER and len(tokens) == 2:
            bias = _parse_weight_value(path, number, tokens[1])
            continue
        if len(tokens) != 2:
            raise PersistenceError(f"{path}:{number}: expected '<id>\\t<value>', got {line!r}")
        try:
            feature_id = int(tokens[0])
        except ValueError as exc:
            raise PersistenceError(f"{path}:{number}: feature id must be an integer") from exc
        value = _parse_weight_value(path, number, tokens[1])
        if value != 0.0:
            weights[feature_id] = value
    return weights, bias


def _parse_weight_value(path: str | Path, number: int, token: str) -> float:
    try:
        return float(token)
    except ValueError as exc:
        raise PersistenceError(f"{path}:{number}: invalid weight {token!r}") from exc


def append_checkpoint(path: str | Path, record: CheckpointRecord) -> None:
    """Append ``record`` to the log, writing the header for a new file."""

    path = Path(path)
    write_header = not path.exists() or path.stat().st_size == 0
    with path.open("a") as handle:
        if write_header:
            handle.write(CHECKPOINT_HEADER + "\n")
        handle.write(record.to_line() + "\n")


def read_checkpoint(path: str | Path) -> CheckpointRecord | None:
    """Return the newest record in the log, or None if there is none.

    A missing file and a header-only file both return None. Any other line
    that cannot be parsed raises :class:`CheckpointFormatError`.
    """

    path = Path(path)
    if not path.exists():
        logger.info("checkpoint_missing", extra={"path": str(path)})
        return None
    lines = [line for line in path.read_text().splitlines() if line.strip()]
    if not lines:
        return None
    last = lines[-1]
    if len(lines) == 1 and not _is_numeric(last.split("\t")[0]):
        return None
    return CheckpointRecord.from_line(last, str(path))


def save_checkpoint(classifier: "PocketPerceptronClassifier", path: str | Path) -> CheckpointRecord:
    record = classifier.checkpoint()
    append_checkpoint(path, record)
    logger.info("checkpoint_saved", extra={"path": str(path), "total_processed": record.total_processed})
    return record


def load_checkpoint(classifier: "PocketPerceptronClassifier", path: str | Path) -> CheckpointRecord | None:
    """Seed ``classifier`` from the newest record; leave defaults if absent."""

    record = read_checkpoint(path)
    if record is not None:
        classifier.apply_checkpoint(record)
        logger.info("checkpoint_loaded", extra={"path": str(path), "total_processed": record.total_processed})
    return record
