"""Domain models for the temperature reading packet."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

TEMPERATURE_MASK = 0x7FFF
POWER_STATUS_MASK = 0x8000

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
UINT8_MAX = 0xFF
UINT16_MAX = 0xFFFF


class PowerStatus(str, Enum):
    """Power source reported by the sensor; the value doubles as display label."""

    network = "network"
    battery = "battery"


@dataclass(frozen=True, slots=True)
class TempStatus:
    """The 16-bit ``temp_status`` field as two explicit sub-values.

    Bit 15 carries the power status, bits 0-14 the temperature in tenths of a
    degree.
    """

    temperature: int
    power_status: PowerStatus

    def __post_init__(self) -> None:
        if not 0 <= self.temperature <= TEMPERATURE_MASK:
            raise ValueError(
                f"temperature {self.temperature} does not fit in 15 bits"
            )

    def pack(self) -> int:
        flag = POWER_STATUS_MASK if self.power_status is PowerStatus.battery else 0
        return (self.temperature & TEMPERATURE_MASK) | flag

    @classmethod
    def unpack(cls, value: int) -> "TempStatus":
        if not 0 <= value <= UINT16_MAX:
            raise ValueError(f"temp_status {value} does not fit in 16 bits")
        status = PowerStatus.battery if value & POWER_STATUS_MASK else PowerStatus.network
        return cls(temperature=value & TEMPERATURE_MASK, power_status=status)


@dataclass(frozen=True, slots=True)
class Reading:
    """One telemetry record as carried on the wire."""

    timestamp: int
    temp_status: TempStatus
    id: int
    checksum: int

    def __post_init__(self) -> None:
        if not INT32_MIN <= self.timestamp <= INT32_MAX:
            raise ValueError(f"timestamp {self.timestamp} is not a signed 32-bit value")
        if not 0 <= self.id <= UINT8_MAX:
            raise ValueError(f"id {self.id} is not an unsigned 8-bit value")
        if not 0 <= self.checksum <= UINT8_MAX:
            raise ValueError(f"checksum {self.checksum} is not an unsigned 8-bit value")

    @property
    def temperature(self) -> int:
        return self.temp_status.temperature

    @property
    def power_status(self) -> PowerStatus:
        return self.temp_status.power_status
