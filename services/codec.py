"""Wire codec for the fixed 8-byte temperature reading packet.

Layout, all multi-byte fields in network byte order::

    offset  size  field
    0       4     timestamp    signed seconds since epoch
    4       2     temp_status  bit 15 power status, bits 0-14 tenths of a degree
    6       1     id           sequence counter
    7       1     checksum     negated byte-sum of bytes 0-6

A packet is valid when the byte-sum of all eight bytes is 0 modulo 256.
"""

from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from models.records import PowerStatus, Reading, TempStatus, UINT8_MAX
from models.schemas import ReadingView

PACKET_FORMAT = "!iHBB"
BODY_FORMAT = "!iHB"
PACKET_SIZE = struct.calcsize(PACKET_FORMAT)

TEMPERATURE_MIN = 200
TEMPERATURE_MAX = 1200

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Buffer = Union[bytes, bytearray, memoryview]


class DecodeErrorReason(str, Enum):
    malformed_length = "malformed_length"


class DecodeError(ValueError):
    """Raised when a buffer cannot be turned into a reading."""

    def __init__(self, reason: DecodeErrorReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


def clamp_temperature(tenths: int) -> int:
    return max(TEMPERATURE_MIN, min(TEMPERATURE_MAX, tenths))


def wrap_timestamp(timestamp: int) -> int:
    """Fold any integer into the signed 32-bit range (two's complement)."""
    return ((timestamp + (1 << 31)) % (1 << 32)) - (1 << 31)


def compute_checksum(body: Buffer) -> int:
    return -sum(bytes(body)) & UINT8_MAX


def build_reading(
    timestamp: int,
    raw_temperature_tenths: int,
    power_status: PowerStatus,
    reading_id: int,
) -> Reading:
    """Clamp and truncate raw inputs into a checksummed reading."""
    temp_status = TempStatus(
        temperature=clamp_temperature(raw_temperature_tenths),
        power_status=PowerStatus(power_status),
    )
    timestamp = wrap_timestamp(timestamp)
    reading_id &= UINT8_MAX
    body = struct.pack(BODY_FORMAT, timestamp, temp_status.pack(), reading_id)
    return Reading(
        timestamp=timestamp,
        temp_status=temp_status,
        id=reading_id,
        checksum=compute_checksum(body),
    )


def serialize(reading: Reading) -> bytes:
    return struct.pack(
        PACKET_FORMAT,
        reading.timestamp,
        reading.temp_status.pack(),
        reading.id,
        reading.checksum,
    )


def encode(
    timestamp: int,
    raw_temperature_tenths: int,
    power_status: PowerStatus,
    reading_id: int,
) -> bytes:
    return serialize(build_reading(timestamp, raw_temperature_tenths, power_status, reading_id))


def decode(data: Buffer) -> Reading:
    if len(data) != PACKET_SIZE:
        raise DecodeError(
            DecodeErrorReason.malformed_length,
            f"expected {PACKET_SIZE} bytes, got {len(data)}",
        )
    timestamp, temp_status, reading_id, checksum = struct.unpack(PACKET_FORMAT, data)
    return Reading(
        timestamp=timestamp,
        temp_status=TempStatus.unpack(temp_status),
        id=reading_id,
        checksum=checksum,
    )


def validate(reading: Reading) -> bool:
    return sum(serialize(reading)) & UINT8_MAX == 0


def describe(reading: Reading, source: Optional[str] = None) -> ReadingView:
    temperature = reading.temperature
    return ReadingView(
        id=reading.id,
        timestamp=reading.timestamp,
        recorded_at=_EPOCH + timedelta(seconds=reading.timestamp),
        whole_degrees=temperature // 10,
        tenths_digit=temperature % 10,
        power_status=reading.power_status,
        checksum=reading.checksum,
        valid=validate(reading),
        source=source,
    )
