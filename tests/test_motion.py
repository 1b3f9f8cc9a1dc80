import pytest

from trackstats.analyze.motion import is_stationary


@pytest.mark.parametrize("d", [0.0, 0.5, 100.0, 1e6])
@pytest.mark.parametrize("t", [0.0, 1.0, 4.999])
def test_short_segments_are_never_pauses(d, t):
    assert is_stationary(d, t) is False


@pytest.mark.parametrize(
    "d, t, expected",
    [
        (1.4, 5, True),    # 0.28 m/s
        (1.6, 5, False),   # 0.32 m/s
        (0.0, 10, True),
        (3.0, 10, False),  # exactly on the speed threshold is moving
        (2.9, 10, True),
    ],
)
def test_speed_threshold(d, t, expected):
    assert is_stationary(d, t) is expected


def test_zero_duration_does_not_divide():
    assert is_stationary(0.0, 0.0, pause_threshold_s=0.0) is False


def test_negative_duration_is_moving():
    assert is_stationary(0.0, -10.0) is False


def test_custom_thresholds():
    assert is_stationary(4.0, 2.0, speed_threshold_mps=3.0, pause_threshold_s=2.0) is True
    assert is_stationary(4.0, 2.0, speed_threshold_mps=3.0, pause_threshold_s=3.0) is False
