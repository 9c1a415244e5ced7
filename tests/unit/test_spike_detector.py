"""
Unit tests for IID spike and change point detection.
"""
import numpy as np
import pytest
from scipy import stats

from mlrecipes.config.exceptions import InvalidArgumentError
from mlrecipes.services.spike_detector import compute_p_values, detect_iid_change_points, detect_iid_spikes


def test_p_values_without_history():
    p_values = compute_p_values([1.0, 2.0, 3.0], history_length=5)

    assert p_values[0] == 0.5
    assert p_values[1] == 0.5


def test_p_values_for_constant_history():
    p_values = compute_p_values([4.0, 4.0, 4.0, 9.0], history_length=3)

    assert p_values[2] == 0.5
    assert p_values[3] < 1e-6


def test_p_value_is_two_sided_normal_tail():
    # history mean 2, sample std 1, so the last point sits at z = 2
    p_values = compute_p_values([1.0, 2.0, 3.0, 4.0], history_length=3)

    assert p_values[3] == pytest.approx(2.0 * stats.norm.sf(2.0))
    assert p_values[3] == pytest.approx(0.0455, abs=1e-4)


def test_spike_is_flagged():
    values = [10.0, 11.0, 10.5, 10.5, 10.0, 10.0, 10.2, 9.8, 50.0, 10.1, 9.9]

    detections = detect_iid_spikes(values, confidence=95, history_length=5)

    assert list(detections.columns) == ["alert", "score", "p_value"]
    assert detections["alert"].tolist()[8] == 1
    assert detections["alert"].sum() == 1
    assert detections["score"].tolist() == values


def test_level_shift_is_a_change_point():
    values = [10.0, 10.5, 9.5, 10.2, 9.8, 10.1, 9.9, 10.0] + [30.0, 30.5, 29.5, 30.2, 29.8, 30.1]

    detections = detect_iid_change_points(values, confidence=95, change_history_length=4)

    assert list(detections.columns) == ["alert", "score", "p_value", "martingale"]
    assert detections["alert"].iloc[:8].sum() == 0
    assert detections["alert"].iloc[8:].sum() >= 1


def test_steady_series_has_no_alerts():
    values = np.tile([1.0, 2.0], 20)

    assert detect_iid_spikes(values, history_length=6)["alert"].sum() == 0
    assert detect_iid_change_points(values, change_history_length=6)["alert"].sum() == 0


@pytest.mark.parametrize("confidence", [0.0, 100.0, -5.0])
def test_invalid_confidence(confidence):
    with pytest.raises(InvalidArgumentError):
        detect_iid_spikes([1.0, 2.0], confidence=confidence)


def test_invalid_history_length():
    with pytest.raises(InvalidArgumentError):
        detect_iid_change_points([1.0, 2.0], change_history_length=1)
