import random

import pytest

from pocket_perceptron.auc import AucEstimator


def test_auc_rises_when_positives_outrank_negatives() -> None:
    auc = AucEstimator(window=9)
    auc.observe(-1, -1.0)
    # Positive score unset: no ranking yet.
    assert auc.value == 0.0
    auc.observe(1, 1.0)
    assert auc.value == pytest.approx(0.2)
    auc.observe(-1, 2.0)
    assert auc.value == pytest.approx(0.8 * 0.2)


def test_auc_stays_in_unit_interval() -> None:
    rng = random.Random(7)
    auc = AucEstimator(window=5)
    for _ in range(500):
        value = auc.observe(rng.choice([1, -1]), rng.uniform(-5.0, 5.0))
        assert 0.0 <= value <= 1.0


def test_reconfigure_window_updates_alpha() -> None:
    auc = AucEstimator(window=10)
    auc.reconfigure_window(19)
    assert auc.alpha == 2.0 / 20.0


def test_restore_rejects_out_of_range() -> None:
    auc = AucEstimator()
    with pytest.raises(ValueError):
        auc.restore(1.5)
