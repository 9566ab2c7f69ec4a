from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_HOST_ENV = "TELEMETRY_HOST"
_PORT_ENV = "TELEMETRY_PORT"
_INTERVAL_ENV = "TELEMETRY_INTERVAL"
_BIND_HOST_ENV = "TELEMETRY_BIND_HOST"
_RECV_BUFFER_ENV = "TELEMETRY_RECV_BUFFER"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_MAX_PORT = 65535
# must exceed the 8-byte packet so oversized datagrams are not truncated into it
_MIN_RECV_BUFFER = 9


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    interval: float
    bind_host: str
    receive_buffer_size: int
    log_level: str


def _read_raw_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_str_env(name: str, default: str) -> str:
    return _read_raw_env(name) or default


def _read_int_env(name: str, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    candidate = _read_raw_env(name)
    if candidate is None:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    if parsed < minimum:
        return default
    if maximum is not None and parsed > maximum:
        return default
    return parsed


def _read_interval(default: float) -> float:
    candidate = _read_raw_env(_INTERVAL_ENV)
    if candidate is None:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    candidate = _read_raw_env(_LOG_LEVEL_ENV)
    if candidate is None:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        host=_read_str_env(_HOST_ENV, "127.0.0.1"),
        port=_read_int_env(_PORT_ENV, 5005, minimum=1, maximum=_MAX_PORT),
        interval=_read_interval(1.0),
        bind_host=_read_str_env(_BIND_HOST_ENV, "0.0.0.0"),
        receive_buffer_size=_read_int_env(_RECV_BUFFER_ENV, 64, minimum=_MIN_RECV_BUFFER),
        log_level=_read_log_level("INFO"),
    )
