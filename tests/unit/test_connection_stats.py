# pylint: disable=missing-module-docstring,missing-function-docstring

import math

import pytest

from transport.stats import ConnectionStats, reconnect_delay_ms


def test_average_is_nan_before_first_attempt():
    stats = ConnectionStats()

    assert len(stats) == 0
    assert math.isnan(stats.average())


def test_window_keeps_last_six():
    stats = ConnectionStats()

    for ms in (10, 20, 30, 40, 50, 60, 70, 80):
        avg = stats.record(ms)

    assert stats.durations() == (30, 40, 50, 60, 70, 80)
    assert avg == pytest.approx(55.0)


def test_negative_durations_are_clamped():
    stats = ConnectionStats(window=2)

    assert stats.record(-5) == 0.0


def test_window_must_be_positive():
    with pytest.raises(ValueError):
        ConnectionStats(window=0)


@pytest.mark.parametrize(
    "avg, expected",
    [
        (math.nan, 5000.0),
        (0.0, 5000.0),
        (1000.0, 4000.0),
        (5000.0, 0.0),
        (7000.0, 0.0),
    ],
)
def test_reconnect_delay(avg, expected):
    assert reconnect_delay_ms(avg) == expected
