"""Receive loop: decode, validate and hand readings to a presenter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from models.schemas import ReadingView
from services.codec import DecodeError, decode, describe
from transport.udp import Datagram

logger = logging.getLogger(__name__)


class DatagramSource(Protocol):
    def receive(self) -> Datagram: ...


@dataclass
class ReceiverStats:
    received: int = 0
    presented: int = 0
    discarded: int = 0
    invalid: int = 0


class ReceiverService:
    """Turns incoming datagrams into presented readings.

    Malformed datagrams are logged and dropped. Readings with a bad checksum
    are logged and still presented, flagged as invalid.
    """

    def __init__(
        self,
        transport: DatagramSource,
        presenter: Callable[[ReadingView], None],
    ) -> None:
        self.transport = transport
        self.presenter = presenter
        self.stats = ReceiverStats()

    def handle(self, datagram: Datagram) -> Optional[ReadingView]:
        self.stats.received += 1
        source = str(datagram.source)
        try:
            reading = decode(datagram.payload)
        except DecodeError as exc:
            self.stats.discarded += 1
            logger.warning(
                "Discarding malformed datagram",
                extra={
                    "source": source,
                    "byte_count": len(datagram.payload),
                    "reason": exc.reason.value,
                },
            )
            return None

        view = describe(reading, source=source)
        if not view.valid:
            self.stats.invalid += 1
            logger.warning(
                "Received reading with invalid checksum",
                extra={
                    "source": source,
                    "reading_id": view.id,
                    "checksum": f"0x{view.checksum:02x}",
                },
            )
        self.presenter(view)
        self.stats.presented += 1
        return view

    def run(self, count: Optional[int] = None) -> ReceiverStats:
        """Handle datagrams until ``count`` have arrived, or forever when ``None``."""
        while count is None or self.stats.received < count:
            self.handle(self.transport.receive())
        logger.info(
            "Receiver stopped",
            extra={"received": self.stats.received, "discarded": self.stats.discarded},
        )
        return self.stats
