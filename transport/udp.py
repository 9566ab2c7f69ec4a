"""Datagram transport used by the emitter and the receiver."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Any, Optional, Tuple

DEFAULT_BUFFER_SIZE = 64


class TransportError(Exception):
    """Base class for failures at the socket boundary."""


class AddressResolutionError(TransportError):
    pass


class SocketError(TransportError):
    pass


@dataclass(frozen=True)
class Address:
    host: str
    port: int
    family: int
    sockaddr: Tuple[Any, ...]

    @classmethod
    def from_sockaddr(cls, family: int, sockaddr: Tuple[Any, ...]) -> "Address":
        return cls(host=str(sockaddr[0]), port=int(sockaddr[1]), family=family, sockaddr=tuple(sockaddr))

    def __str__(self) -> str:
        if self.family == socket.AF_INET6:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class Datagram:
    payload: bytes
    source: Address


def resolve(host: Optional[str], port: int, passive: bool = False) -> Address:
    """Resolve ``host``/``port`` to the first UDP address ``getaddrinfo`` offers.

    Both IPv4 and IPv6 results are accepted. With ``passive`` set the address is
    suitable for binding and an empty host means every interface.
    """
    flags = socket.AI_PASSIVE if passive else 0
    try:
        results = socket.getaddrinfo(
            host or None, port, socket.AF_UNSPEC, socket.SOCK_DGRAM, 0, flags
        )
    except socket.gaierror as exc:
        raise AddressResolutionError(
            f"error while fetching address {host}:{port}: {exc.strerror or exc}"
        ) from exc
    if not results:
        raise AddressResolutionError(f"no address found for {host}:{port}")
    family, _socktype, _proto, _canonname, sockaddr = results[0]
    return Address.from_sockaddr(family, sockaddr)


class UdpTransport:
    """Thin wrapper around a UDP socket that raises :class:`SocketError`."""

    def __init__(self, family: int = socket.AF_INET, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        try:
            self._sock = socket.socket(family, socket.SOCK_DGRAM)
        except OSError as exc:
            raise SocketError(f"socket failed: {exc}") from exc
        self.family = family
        self.buffer_size = buffer_size

    @classmethod
    def for_address(cls, address: Address, buffer_size: int = DEFAULT_BUFFER_SIZE) -> "UdpTransport":
        return cls(family=address.family, buffer_size=buffer_size)

    @classmethod
    def listen(
        cls,
        host: Optional[str],
        port: int,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> "UdpTransport":
        address = resolve(host, port, passive=True)
        transport = cls.for_address(address, buffer_size=buffer_size)
        try:
            transport._sock.bind(address.sockaddr)
        except OSError as exc:
            transport.close()
            raise SocketError(f"bind to {address} failed: {exc}") from exc
        return transport

    @property
    def local_address(self) -> Address:
        return Address.from_sockaddr(self.family, self._sock.getsockname())

    def send(self, address: Address, data: bytes) -> int:
        try:
            return self._sock.sendto(data, address.sockaddr)
        except OSError as exc:
            raise SocketError(f"sendto {address} failed: {exc}") from exc

    def receive(self) -> Datagram:
        try:
            payload, sockaddr = self._sock.recvfrom(self.buffer_size)
        except OSError as exc:
            raise SocketError(f"recvfrom failed: {exc}") from exc
        return Datagram(payload=payload, source=Address.from_sockaddr(self.family, sockaddr))

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> "UdpTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
