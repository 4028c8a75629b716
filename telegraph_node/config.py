"""Configuration loading and dataclasses for the telegraph node."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TELEGRAPH_CONFIG_PATH"
DEFAULT_CONFIG_NAME = "config.json"

DEFAULT_CHANNEL = "lobby"
DEFAULT_SERVER = "morse.autodidacts.io"
DEFAULT_PORT = "8000"


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


@dataclass(frozen=True)
class PinConfig:
    key: int = 7
    sounder: int = 10
    sounder_inverted: Optional[int] = None


@dataclass(frozen=True)
class TelegraphConfig:
    channel: str = DEFAULT_CHANNEL
    server: str = DEFAULT_SERVER
    port: str = DEFAULT_PORT
    gpio: bool = True
    pins: PinConfig = field(default_factory=PinConfig)
    log_level: str = "INFO"

    @property
    def url(self) -> str:
        """Websocket address of the configured channel."""
        return f"ws://{self.server}:{self.port}/channel/{self.channel}"


def resolve_config_path(cli_path: Optional[Path] = None) -> Path:
    """Pick the configuration file: CLI flag, then environment, then cwd."""
    if cli_path is not None:
        return cli_path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path(DEFAULT_CONFIG_NAME)


def load_config(path: Path) -> TelegraphConfig:
    """Load configuration, falling back to the built-in defaults.

    The file is a JSON object. Any read or parse failure yields the defaults;
    it is never fatal.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict):
            raise ValueError("configuration must be a mapping")
        config = _parse(raw)
    except (OSError, ValueError, TypeError) as exc:
        _log_event("config_error", path=str(path), error=str(exc))
        config = TelegraphConfig()

    _log_event(
        "configuration",
        channel=config.channel,
        server=config.server,
        port=config.port,
        gpio=config.gpio,
        key_pin=config.pins.key,
        sounder_pin=config.pins.sounder,
        sounder_inverted_pin=config.pins.sounder_inverted,
    )
    return config


def _parse(raw: Any) -> TelegraphConfig:
    return TelegraphConfig(
        channel=str(raw.get("Channel", DEFAULT_CHANNEL)),
        server=str(raw.get("Server", DEFAULT_SERVER)),
        port=str(raw.get("Port", DEFAULT_PORT)),
        gpio=_parse_bool(raw.get("Gpio", True), "Gpio"),
        pins=_parse_pins(raw.get("Pins", {})),
        log_level=str(raw.get("LogLevel", "INFO")),
    )


def _parse_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


def _parse_pins(raw: Any) -> PinConfig:
    if not isinstance(raw, dict):
        raw = {}
    defaults = PinConfig()
    inverted = raw.get("SounderInverted", defaults.sounder_inverted)
    return PinConfig(
        key=int(raw.get("Key", defaults.key)),
        sounder=int(raw.get("Sounder", defaults.sounder)),
        sounder_inverted=int(inverted) if inverted is not None else None,
    )


__all__ = [
    "PinConfig",
    "TelegraphConfig",
    "load_config",
    "resolve_config_path",
]
