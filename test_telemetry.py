"""Tests for the synthetic telemetry window"""
import random

from telemetry import (
    TEMP_RANGE,
    TORQUE_RANGE,
    TelemetrySample,
    advance_telemetry,
    initial_telemetry,
    next_sample,
)


class ExtremeRandom(random.Random):
    """Alternates between the ends of [0, 1) to push values against the clamps"""

    def __init__(self):
        super().__init__(0)
        self.flip = False

    def random(self):
        self.flip = not self.flip
        return 0.999999 if self.flip else 0.0


def test_initial_window_shape():
    window = initial_telemetry(20, random.Random(1))

    assert len(window) == 20
    assert [s.time for s in window] == list(range(20))
    assert window[0].battery == 100
    assert all(TORQUE_RANGE[0] <= s.torque <= TORQUE_RANGE[1] for s in window)
    assert all(TEMP_RANGE[0] <= s.temp <= TEMP_RANGE[1] for s in window)


def test_tick_drops_oldest_and_appends_next():
    window = initial_telemetry(5, random.Random(2))

    advanced = advance_telemetry(window, random.Random(3))

    assert len(advanced) == 5
    assert advanced[:4] == window[1:]
    assert advanced[-1].time == window[-1].time + 1
    assert len(window) == 5


def test_bounds_hold_over_many_ticks():
    for rng in (random.Random(4), ExtremeRandom()):
        window = initial_telemetry(20, rng)
        for _ in range(3000):
            previous = window[-1]
            window = advance_telemetry(window, rng)
            latest = window[-1]

            assert latest.battery <= previous.battery
            assert latest.battery >= 0
            assert TORQUE_RANGE[0] <= latest.torque <= TORQUE_RANGE[1]
            assert TEMP_RANGE[0] <= latest.temp <= TEMP_RANGE[1]


def test_values_clamp_at_range_edges():
    high = TelemetrySample(time=0, torque=90.0, temp=60.0, battery=0.01)
    low = TelemetrySample(time=0, torque=20.0, temp=30.0, battery=0.0)

    class Always(random.Random):
        def __init__(self, value):
            super().__init__(0)
            self.value = value

        def random(self):
            return self.value

    up = next_sample(high, Always(0.999999))
    down = next_sample(low, Always(0.0))

    assert up.torque == 90.0 and up.temp == 60.0 and up.battery == 0.0
    assert down.torque == 20.0 and down.temp == 30.0 and down.battery == 0.0


def test_empty_window_is_reseeded():
    assert len(advance_telemetry([], random.Random(5))) == 20
