"""Simulated temperature source feeding the emitter."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from models.records import PowerStatus
from services.codec import clamp_temperature


@dataclass(frozen=True, slots=True)
class SensorSample:
    temperature_tenths: int
    power_status: PowerStatus


class SimulatedSensor:
    """Bounded random walk over the transmittable temperature range."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        start_tenths: int = 215,
        step_tenths: int = 5,
        battery_probability: float = 0.1,
    ) -> None:
        self._rng = rng or random.Random()
        self._current = clamp_temperature(start_tenths)
        self._step = step_tenths
        self._battery_probability = battery_probability

    def read(self) -> SensorSample:
        delta = self._rng.randint(-self._step, self._step)
        self._current = clamp_temperature(self._current + delta)
        on_battery = self._rng.random() < self._battery_probability
        return SensorSample(
            temperature_tenths=self._current,
            power_status=PowerStatus.battery if on_battery else PowerStatus.network,
        )
