import random

import pytest

from pocket_perceptron.classifier import PocketPerceptronClassifier
from pocket_perceptron.config import ClassifierConfig
from pocket_perceptron.ema import ClassBalance
from pocket_perceptron.errors import ThresholdManagedError, UnsupportedOperationError
from pocket_perceptron.linear_model import Example, SparseLinearModel


def _classifier(**overrides) -> PocketPerceptronClassifier:
    config = ClassifierConfig(learning_rate=0.1, ema_window=9, **overrides)
    return PocketPerceptronClassifier(config)


def _random_examples(count: int, seed: int = 3) -> list[Example]:
    rng = random.Random(seed)
    examples = []
    for _ in range(count):
        label = rng.choice([1, -1])
        features = {rng.randrange(20): rng.uniform(-1.0, 1.0) for _ in range(4)}
        # Feature 0 carries the label signal.
        features[0] = label * rng.uniform(0.5, 1.5)
        examples.append(Example(features=features, label=label))
    return examples


def test_false_negative_then_false_positive_restores_weight() -> None:
    classifier = _classifier()

    first = Example(features={3: 1.0}, label=1)
    assert not classifier.train(first)
    assert first.predicted_score == 0.0
    assert first.predicted_label == -1
    assert classifier.confusion_counts() == {"TP": 0, "FP": 0, "TN": 0, "FN": 1}
    assert classifier.pocket_counters.current.streak == 0
    assert classifier.model.weights[3] == pytest.approx(0.2)
    assert classifier.bias == 0.0

    second = Example(features={3: 1.0}, label=-1)
    assert not classifier.train(second)
    assert second.predicted_score == pytest.approx(0.2)
    assert second.predicted_label == 1
    assert classifier.confusion_counts() == {"TP": 0, "FP": 1, "TN": 0, "FN": 1}
    assert classifier.model.weights[3] == pytest.approx(0.0)
    assert classifier.bias == 0.0


def test_correct_prediction_updates_pocket_and_leaves_weights() -> None:
    model = SparseLinearModel(weights={1: 1.0})
    classifier = PocketPerceptronClassifier(ClassifierConfig(ema_window=9), model=model)

    assert classifier.train(Example(features={1: 2.0}, label=1))
    assert classifier.train(Example(features={1: -2.0}, label=-1))

    assert classifier.confusion_counts() == {"TP": 1, "FP": 0, "TN": 1, "FN": 0}
    assert classifier.pocket_counters.current.streak == 2
    assert classifier.pocket_counters.current.total_correct == 2
    assert model.weights == {1: 1.0}


def test_confusion_total_matches_train_calls_since_reset() -> None:
    classifier = _classifier()
    examples = _random_examples(120)
    for example in examples[:40]:
        classifier.train(example)
    classifier.reset_confusion_counts()
    for example in examples[40:]:
        classifier.train(example)

    assert sum(classifier.confusion_counts().values()) == 80
    assert classifier.total_processed == 120


def test_error_ema_follows_recurrence() -> None:
    classifier = _classifier()
    alpha = classifier.ema_alpha
    assert alpha == pytest.approx(0.2)

    for example in _random_examples(60):
        before = classifier.error_ema()
        correct = classifier.train(example)
        if correct:
            assert classifier.error_ema() == pytest.approx((1 - alpha) * before)
        else:
            assert classifier.error_ema() == pytest.approx(alpha + (1 - alpha) * before)


def test_statistics_stay_in_bounds() -> None:
    classifier = _classifier()
    for example in _random_examples(300, seed=11):
        classifier.train(example)
        assert classifier.positive_count() >= 0.0
        assert classifier.negative_count() >= 0.0
        assert 0.0 <= classifier.auc() <= 1.0
        assert 0.0 <= classifier.error_ema() <= 1.0


def test_absent_class_count_converges_to_zero() -> None:
    classifier = _classifier()
    for _ in range(100):
        classifier.train(Example(features={1: 1.0}, label=1))

    assert classifier.negative_count() < 1e-6


def test_predict_does_not_mutate_state() -> None:
    classifier = _classifier()
    classifier.train(Example(features={3: 1.0}, label=1))
    snapshot = classifier.checkpoint()

    score = classifier.predict(Example(features={3: 2.0}, label=-1))

    assert score == pytest.approx(0.4)
    after = classifier.checkpoint()
    assert after.total_processed == snapshot.total_processed
    assert classifier.confusion_counts() == {"TP": 0, "FP": 0, "TN": 0, "FN": 1}


def test_set_ema_window_updates_auc_estimator() -> None:
    classifier = _classifier()
    classifier.set_ema_window(39)

    assert classifier.ema_window == 39
    assert classifier.ema_alpha == 2.0 / 40.0
    assert classifier.auc_alpha == classifier.ema_alpha


def test_adaptive_learning_rate_scales_by_opposite_class() -> None:
    classifier = _classifier(adaptive_learning_rate=True)
    # Initial class counts are both 1.0.
    classifier.train(Example(features={1: 1.0}, label=-1))
    negative = classifier.negative_count()
    assert classifier.model.weights == {}

    classifier.train(Example(features={2: 1.0}, label=1))
    # delta = eta * neg_count * (1 - (-1))
    assert classifier.model.weights[2] == pytest.approx(0.1 * negative * 2)


def test_threshold_adapts_toward_target_precision() -> None:
    classifier = _classifier(target_precision=0.9, threshold_step=0.01)
    classifier.train(Example(features={3: 1.0}, label=1))
    # No positive predictions yet, so precision is 1.0 >= target.
    assert classifier.threshold == pytest.approx(-0.01)

    classifier.train(Example(features={3: 1.0}, label=-1))
    # The false positive drops precision to 0.0 < target.
    assert classifier.threshold == pytest.approx(0.0)


def test_threshold_is_inert_without_target() -> None:
    classifier = _classifier()
    for example in _random_examples(30):
        classifier.train(example)
    assert classifier.threshold == 0.0


def test_threshold_in_decision_shifts_boundary() -> None:
    model = SparseLinearModel(weights={1: 0.005})
    classifier = PocketPerceptronClassifier(
        ClassifierConfig(target_precision=0.0, threshold_step=0.01, threshold_in_decision=True),
        model=model,
    )
    # Precision never falls below 0.0, so the threshold keeps decreasing.
    classifier.train(Example(features={2: 1.0}, label=-1))
    assert classifier.decision_boundary == pytest.approx(-0.01)

    example = Example(features={1: 0.0}, label=1)
    assert classifier.train(example)
    assert example.predicted_label == 1


def test_mandatory_failures() -> None:
    classifier = _classifier()
    with pytest.raises(ThresholdManagedError):
        classifier.set_threshold(0.5)
    with pytest.raises(UnsupportedOperationError):
        classifier.set_positive_margin(0.1)
    with pytest.raises(NotImplementedError):
        classifier.set_negative_margin(0.1)


def test_setters_validate_arguments() -> None:
    classifier = _classifier()
    with pytest.raises(ValueError):
        classifier.set_learning_rate(0.0)
    with pytest.raises(ValueError):
        classifier.set_target_precision(1.5)
    with pytest.raises(ValueError):
        classifier.set_ema_window(0)

    classifier.set_target_precision(None)
    assert classifier.target_precision is None


def test_shared_class_balance_across_classifiers() -> None:
    shared = ClassBalance()
    first = PocketPerceptronClassifier(ClassifierConfig(ema_window=9), balance=shared)
    second = PocketPerceptronClassifier(ClassifierConfig(ema_window=9), balance=shared)
    first.train(Example(features={1: 1.0}, label=1))

    assert second.positive_count() == first.positive_count()
    assert _classifier().positive_count() == 1.0


def test_learns_separable_stream() -> None:
    classifier = _classifier()
    examples = _random_examples(2000, seed=5)
    for example in examples:
        classifier.train(example)

    assert classifier.error_ema() < 0.5
    assert classifier.model.weights[0] > 0.0
