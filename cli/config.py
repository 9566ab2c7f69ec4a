from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from settings import get_settings


@dataclass(frozen=True)
class EmitterConfig:
    host: str
    port: int
    interval: float


@dataclass(frozen=True)
class ReceiverConfig:
    bind_host: str
    port: int
    buffer_size: int


def load_emitter_config(
    host: Optional[str] = None,
    port: Optional[int] = None,
    interval: Optional[float] = None,
) -> EmitterConfig:
    settings = get_settings()
    return EmitterConfig(
        host=host or settings.host,
        port=port if port is not None else settings.port,
        interval=interval if interval is not None else settings.interval,
    )


def load_receiver_config(
    port: Optional[int] = None,
    bind_host: Optional[str] = None,
) -> ReceiverConfig:
    settings = get_settings()
    return ReceiverConfig(
        bind_host=bind_host or settings.bind_host,
        port=port if port is not None else settings.port,
        buffer_size=settings.receive_buffer_size,
    )
