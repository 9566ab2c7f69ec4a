from __future__ import annotations

from typing import Iterator

import pytest

from cli.config import load_emitter_config, load_receiver_config
from settings import get_settings

_ENV_NAMES = (
    "TELEMETRY_HOST",
    "TELEMETRY_PORT",
    "TELEMETRY_INTERVAL",
    "TELEMETRY_BIND_HOST",
    "TELEMETRY_RECV_BUFFER",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch) -> Iterator[None]:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_without_environment() -> None:
    settings = get_settings()

    assert settings.host == "127.0.0.1"
    assert settings.port == 5005
    assert settings.interval == 1.0
    assert settings.bind_host == "0.0.0.0"
    assert settings.receive_buffer_size == 64
    assert settings.log_level == "INFO"


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("TELEMETRY_HOST", "sensor-gw.local")
    monkeypatch.setenv("TELEMETRY_PORT", "6100")
    monkeypatch.setenv("TELEMETRY_INTERVAL", "2.5")
    monkeypatch.setenv("TELEMETRY_BIND_HOST", "::")
    monkeypatch.setenv("TELEMETRY_RECV_BUFFER", "128")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.host == "sensor-gw.local"
    assert settings.port == 6100
    assert settings.interval == 2.5
    assert settings.bind_host == "::"
    assert settings.receive_buffer_size == 128
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TELEMETRY_PORT", "not-a-port"),
        ("TELEMETRY_PORT", "0"),
        ("TELEMETRY_PORT", "70000"),
        ("TELEMETRY_INTERVAL", "-1"),
        ("TELEMETRY_INTERVAL", "soon"),
        ("TELEMETRY_RECV_BUFFER", "4"),
        ("TELEMETRY_RECV_BUFFER", "8"),
        ("TELEMETRY_HOST", "   "),
    ],
)
def test_invalid_values_fall_back_to_defaults(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    settings = get_settings()

    assert settings.host == "127.0.0.1"
    assert settings.port == 5005
    assert settings.interval == 1.0
    assert settings.receive_buffer_size == 64


def test_cli_values_take_precedence_over_settings(monkeypatch) -> None:
    monkeypatch.setenv("TELEMETRY_PORT", "6100")

    emitter = load_emitter_config(host="10.1.1.1", interval=0.25)
    receiver = load_receiver_config(port=7000)

    assert emitter.host == "10.1.1.1"
    assert emitter.port == 6100
    assert emitter.interval == 0.25
    assert receiver.port == 7000
    assert receiver.bind_host == "0.0.0.0"
    assert receiver.buffer_size == 64
