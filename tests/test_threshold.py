import pytest

from pocket_perceptron.threshold import ThresholdController, update_threshold


def test_update_threshold_direction() -> None:
    assert update_threshold(0.0, precision=0.5, target_precision=0.9, step=0.1) == pytest.approx(0.1)
    assert update_threshold(0.0, precision=0.95, target_precision=0.9, step=0.1) == pytest.approx(-0.1)
    # Equal precision counts as "not below".
    assert update_threshold(0.0, precision=0.9, target_precision=0.9, step=0.1) == pytest.approx(-0.1)


def test_controller_disabled_without_target() -> None:
    controller = ThresholdController()
    assert not controller.enabled
    assert controller.adapt(0.1) == 0.0


def test_controller_rejects_negative_step() -> None:
    with pytest.raises(ValueError):
        ThresholdController(step=-1.0)
