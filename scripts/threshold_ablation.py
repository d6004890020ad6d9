"""Compare the reference decision rule against the threshold-aware one.

Both classifiers see the same synthetic, class-imbalanced stream with a
target precision configured; only ``threshold_in_decision`` differs.
"""

from __future__ import annotations

from dataclasses import dataclass

import random

from pocket_perceptron.classifier import PocketPerceptronClassifier
from pocket_perceptron.config import ClassifierConfig
from pocket_perceptron.linear_model import Example


@dataclass
class AblationResult:
    label: str
    precision: float
    recall: float
    auc: float
    threshold: float


def _stream(count: int, positive_rate: float, seed: int) -> list[Example]:
    rng = random.Random(seed)
    examples = []
    for _ in range(count):
        label = 1 if rng.random() < positive_rate else -1
        features = {rng.randrange(1, 200): rng.uniform(0.0, 1.0) for _ in range(8)}
        features[0] = label * 0.3 + rng.gauss(0.0, 0.5)
        examples.append(Example(features=features, label=label))
    return examples


def _run(label: str, threshold_in_decision: bool, examples: list[Example]) -> AblationResult:
    classifier = PocketPerceptronClassifier(
        ClassifierConfig(
            learning_rate=0.05,
            ema_window=500,
            target_precision=0.8,
            threshold_step=1e-3,
            threshold_in_decision=threshold_in_decision,
        )
    )
    for example in examples:
        classifier.train(Example(features=example.features, label=example.label))
    return AblationResult(label, classifier.precision(), classifier.recall(), classifier.auc(), classifier.threshold)


def run() -> list[AblationResult]:
    examples = _stream(20_000, positive_rate=0.1, seed=42)
    return [
        _run("bias_only", False, examples),
        _run("bias_plus_threshold", True, examples),
    ]


if __name__ == "__main__":
    for result in run():
        print(
            f"{result.label} precision={result.precision:.4f} recall={result.recall:.4f} "
            f"auc={result.auc:.4f} threshold={result.threshold:.4f}"
        )
