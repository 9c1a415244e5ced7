"""
Independent and identically distributed (IID) anomaly detection.

Spikes are points whose value is unlikely given the trailing history.
Change points are detected with a power martingale over the same
p-values, summed over a sliding window.
"""
from typing import Sequence

import numpy as np
import pandas as pd
from scipy import stats

from ..config.exceptions import InvalidArgumentError
from ..config.logging import get_logger

logger = get_logger(__name__)

MARTINGALE_EPSILON = 0.1
_MIN_P_VALUE = 1e-12


def _validate(values: Sequence[float], confidence: float, history_length: int) -> np.ndarray:
    if not 0.0 < confidence < 100.0:
        raise InvalidArgumentError(f"confidence must be in (0, 100), got {confidence}")
    if history_length < 2:
        raise InvalidArgumentError(f"history length must be at least 2, got {history_length}")
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 1:
        raise InvalidArgumentError("values must be one-dimensional")
    return arr


def compute_p_values(values: Sequence[float], history_length: int) -> np.ndarray:
    """
    Two-sided Gaussian p-value of each point against its trailing history.

    Points with fewer than two history values, or a constant history, get 0.5.
    """
    arr = np.asarray(values, dtype=np.float64)
    p_values = np.full(arr.size, 0.5)
    for t in range(arr.size):
        history = arr[max(0, t - history_length):t]
        if history.size < 2:
            continue
        std = history.std(ddof=1)
        if std == 0.0:
            p_values[t] = 0.5 if arr[t] == history[0] else _MIN_P_VALUE
            continue
        z = abs(arr[t] - history.mean()) / std
        p_values[t] = max(2.0 * stats.norm.sf(z), _MIN_P_VALUE)
    return p_values


def detect_iid_spikes(values: Sequence[float], confidence: float = 95.0, history_length: int = 10) -> pd.DataFrame:
    """
    Flag spikes in a series.

    Args:
        values: Observations in time order
        confidence: Confidence level in percent; alert when p < 1 - confidence / 100
        history_length: Number of trailing points each p-value is computed against

    Returns:
        DataFrame with columns alert (0/1), score (the raw value) and p_value
    """
    arr = _validate(values, confidence, history_length)
    p_values = compute_p_values(arr, history_length)
    threshold = 1.0 - confidence / 100.0
    alerts = (p_values < threshold).astype(int)
    logger.info("Detected spikes", point_count=int(arr.size), spike_count=int(alerts.sum()))
    return pd.DataFrame({"alert": alerts, "score": arr, "p_value": p_values})


def detect_iid_change_points(
    values: Sequence[float],
    confidence: float = 95.0,
    change_history_length: int = 10,
) -> pd.DataFrame:
    """
    Flag change points in a series.

    The log power martingale is the sum of ``log(eps) + (eps - 1) * log(p)``
    over the last ``change_history_length`` points. An alert fires when the
    martingale exceeds ``1 / (1 - confidence / 100)``; the window is then
    cleared.

    Returns:
        DataFrame with columns alert (0/1), score, p_value and martingale
    """
    arr = _validate(values, confidence, change_history_length)
    p_values = compute_p_values(arr, change_history_length)
    log_threshold = np.log(1.0 / (1.0 - confidence / 100.0))

    window = []
    alerts = np.zeros(arr.size, dtype=int)
    martingales = np.zeros(arr.size)
    for t, p in enumerate(p_values):
        window.append(np.log(MARTINGALE_EPSILON) + (MARTINGALE_EPSILON - 1.0) * np.log(p))
        if len(window) > change_history_length:
            window.pop(0)
        log_martingale = sum(window)
        martingales[t] = np.exp(min(log_martingale, 700.0))
        if log_martingale > log_threshold:
            alerts[t] = 1
            window.clear()

    logger.info("Detected change points", point_count=int(arr.size), change_point_count=int(alerts.sum()))
    return pd.DataFrame({"alert": alerts, "score": arr, "p_value": p_values, "martingale": martingales})
