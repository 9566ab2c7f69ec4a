from __future__ import annotations

import socket
from typing import Iterable, List

import pytest

from models.records import PowerStatus
from models.schemas import ReadingView
from services.codec import encode
from services.receiver import ReceiverService
from transport.udp import Address, Datagram, SocketError, UdpTransport

SOURCE = Address.from_sockaddr(socket.AF_INET, ("192.0.2.10", 40000))


class QueuedTransport:
    def __init__(self, payloads: Iterable[bytes]) -> None:
        self._payloads = list(payloads)

    def receive(self) -> Datagram:
        if not self._payloads:
            raise SocketError("recvfrom failed: connection reset")
        return Datagram(payload=self._payloads.pop(0), source=SOURCE)


@pytest.fixture()
def presented() -> List[ReadingView]:
    return []


def test_valid_reading_is_presented(presented: List[ReadingView]) -> None:
    transport = QueuedTransport([encode(0, 200, PowerStatus.network, 0)])
    service = ReceiverService(transport, presented.append)

    stats = service.run(count=1)

    assert stats.received == 1
    assert stats.presented == 1
    assert stats.discarded == 0
    assert stats.invalid == 0
    view = presented[0]
    assert view.source == "192.0.2.10:40000"
    assert view.temperature_label == "20.0"
    assert view.valid is True


def test_malformed_datagram_is_discarded_and_loop_continues(presented: List[ReadingView]) -> None:
    transport = QueuedTransport(
        [b"Witam, witam.\x00", encode(5, 300, PowerStatus.battery, 1)]
    )
    service = ReceiverService(transport, presented.append)

    stats = service.run(count=2)

    assert stats.received == 2
    assert stats.discarded == 1
    assert stats.presented == 1
    assert presented[0].id == 1
    assert presented[0].power_status is PowerStatus.battery


def test_invalid_checksum_is_logged_and_still_presented(
    presented: List[ReadingView], caplog: pytest.LogCaptureFixture
) -> None:
    packet = bytearray(encode(0, 200, PowerStatus.network, 0))
    packet[7] ^= 0xFF
    service = ReceiverService(QueuedTransport([bytes(packet)]), presented.append)

    with caplog.at_level("WARNING"):
        stats = service.run(count=1)

    assert stats.invalid == 1
    assert presented[0].valid is False
    assert presented[0].validity_label == "invalid"
    assert "invalid checksum" in caplog.text


def test_handle_returns_none_for_malformed_datagram(presented: List[ReadingView]) -> None:
    service = ReceiverService(QueuedTransport([]), presented.append)

    result = service.handle(Datagram(payload=b"\x00" * 7, source=SOURCE))

    assert result is None
    assert presented == []
    assert service.stats.discarded == 1


def test_transport_error_propagates(presented: List[ReadingView]) -> None:
    transport = QueuedTransport([encode(0, 200, PowerStatus.network, 0)])
    service = ReceiverService(transport, presented.append)

    with pytest.raises(SocketError):
        service.run()

    assert len(presented) == 1


def test_oversized_datagram_over_loopback_is_discarded(presented: List[ReadingView]) -> None:
    with UdpTransport.listen("127.0.0.1", 0, buffer_size=9) as transport:
        transport._sock.settimeout(5.0)  # type: ignore[attr-defined]
        with UdpTransport() as sender:
            sender.send(transport.local_address, encode(0, 200, PowerStatus.network, 0) + b"JUNK")
            stats = ReceiverService(transport, presented.append).run(count=1)

    assert stats.received == 1
    assert stats.discarded == 1
    assert stats.presented == 0
    assert presented == []
