"""Periodic emitter loop that owns the packet sequence counter."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from models.records import Reading, UINT8_MAX
from services.codec import build_reading, serialize
from services.sensor import SimulatedSensor
from transport.udp import Address

logger = logging.getLogger(__name__)


class PacketSender(Protocol):
    def send(self, address: Address, data: bytes) -> int: ...


class EmitterSession:
    """Builds, encodes and sends one reading per interval."""

    def __init__(
        self,
        transport: PacketSender,
        destination: Address,
        sensor: Optional[SimulatedSensor] = None,
        interval: float = 1.0,
        start_id: int = 0,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.transport = transport
        self.destination = destination
        self.sensor = sensor or SimulatedSensor()
        self.interval = interval
        self._next_id = start_id & UINT8_MAX
        self._clock = clock
        self._sleep = sleep

    @property
    def next_id(self) -> int:
        return self._next_id

    def emit_once(self) -> Reading:
        sample = self.sensor.read()
        reading = build_reading(
            timestamp=int(self._clock()),
            raw_temperature_tenths=sample.temperature_tenths,
            power_status=sample.power_status,
            reading_id=self._next_id,
        )
        self.transport.send(self.destination, serialize(reading))
        logger.info(
            "Sent reading",
            extra={
                "reading_id": reading.id,
                "destination": str(self.destination),
                "checksum": f"0x{reading.checksum:02x}",
            },
        )
        self._next_id = (self._next_id + 1) & UINT8_MAX
        return reading

    def run(self, count: Optional[int] = None) -> int:
        """Send readings until ``count`` is reached, or forever when it is ``None``.

        Transport errors propagate and end the loop.
        """
        sent = 0
        logger.info(
            "Emitter started",
            extra={"destination": str(self.destination), "interval": self.interval},
        )
        while count is None or sent < count:
            self.emit_once()
            sent += 1
            if count is not None and sent >= count:
                break
            self._sleep(self.interval)
        logger.info("Emitter stopped", extra={"sent": sent})
        return sent
