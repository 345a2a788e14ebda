"""
Synthetic telemetry for the simulation panel.
Randomly perturbed values for visual effect only; not a physical model.
"""

import random
from dataclasses import dataclass
from typing import List, Optional


TORQUE_RANGE = (20.0, 90.0)
TEMP_RANGE = (30.0, 60.0)
BATTERY_FLOOR = 0.0

TORQUE_STEP = 15.0
TEMP_STEP = 2.0
BATTERY_DRAIN = 0.05


@dataclass(frozen=True)
class TelemetrySample:
    time: int
    torque: float
    temp: float
    battery: float


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def initial_telemetry(length: int = 20, rng: Optional[random.Random] = None) -> List[TelemetrySample]:
    """Seed window of `length` samples, battery draining 0.5 per sample"""
    rng = rng or random.Random()
    return [
        TelemetrySample(
            time=i,
            torque=40 + rng.random() * 20,
            temp=38 + rng.random() * 5,
            battery=max(BATTERY_FLOOR, 100 - i * 0.5),
        )
        for i in range(length)
    ]


def next_sample(last: TelemetrySample, rng: Optional[random.Random] = None) -> TelemetrySample:
    rng = rng or random.Random()
    return TelemetrySample(
        time=last.time + 1,
        torque=clamp(last.torque + (rng.random() - 0.5) * TORQUE_STEP, *TORQUE_RANGE),
        temp=clamp(last.temp + (rng.random() - 0.5) * TEMP_STEP, *TEMP_RANGE),
        battery=max(BATTERY_FLOOR, last.battery - BATTERY_DRAIN),
    )


def advance_telemetry(window: List[TelemetrySample], rng: Optional[random.Random] = None) -> List[TelemetrySample]:
    """
    One tick: drop the oldest sample and append one derived from the newest.
    The window length is preserved; the input list is not modified.
    """
    if not window:
        return initial_telemetry(rng=rng)
    return window[1:] + [next_sample(window[-1], rng)]
