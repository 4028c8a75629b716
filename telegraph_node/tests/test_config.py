"""Tests for configuration loading and fallbacks."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from telegraph_node.config import (
    CONFIG_ENV_VAR,
    PinConfig,
    TelegraphConfig,
    load_config,
    resolve_config_path,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.json"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_falls_back_to_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.json")
    assert config == TelegraphConfig()
    assert config.channel == "lobby"
    assert config.server == "morse.autodidacts.io"
    assert config.port == "8000"
    assert config.gpio is True


@pytest.mark.parametrize("text", ["{not json", "[1, 2, 3]", "", '{"Pins": {"Key": "x"}}'])
def test_malformed_file_falls_back_to_defaults(tmp_path: Path, text: str) -> None:
    assert load_config(_write(tmp_path, text)) == TelegraphConfig()


def test_full_document(tmp_path: Path) -> None:
    raw = {
        "Channel": "wire1",
        "Server": "example.org",
        "Port": 9001,
        "Gpio": False,
        "Pins": {"Key": 26, "Sounder": 19, "SounderInverted": 13},
        "LogLevel": "DEBUG",
    }
    config = load_config(_write(tmp_path, json.dumps(raw)))
    assert config.channel == "wire1"
    assert config.port == "9001"
    assert config.gpio is False
    assert config.pins == PinConfig(key=26, sounder=19, sounder_inverted=13)
    assert config.log_level == "DEBUG"
    assert config.url == "ws://example.org:9001/channel/wire1"


def test_missing_fields_take_defaults(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, '{"Channel": "club"}'))
    assert config.channel == "club"
    assert config.server == "morse.autodidacts.io"
    assert config.pins == PinConfig()
    assert config.pins.sounder_inverted is None


def test_default_url() -> None:
    assert TelegraphConfig().url == "ws://morse.autodidacts.io:8000/channel/lobby"


def test_resolve_config_path_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert resolve_config_path(None) == Path("config.json")

    monkeypatch.setenv(CONFIG_ENV_VAR, "/etc/telegraph.json")
    assert resolve_config_path(None) == Path("/etc/telegraph.json")
    assert resolve_config_path(Path("cli.json")) == Path("cli.json")


def test_tab_indented_document(tmp_path: Path) -> None:
    text = '{\n\t"Channel": "wire1",\n\t"Server": "example.org",\n\t"Port": "9001"\n}'
    config = load_config(_write(tmp_path, text))
    assert config.channel == "wire1"
    assert config.server == "example.org"
    assert config.port == "9001"


@pytest.mark.parametrize("value", ['"false"', "0", "null"])
def test_non_boolean_gpio_falls_back_to_defaults(tmp_path: Path, value: str) -> None:
    text = '{"Channel": "wire1", "Gpio": %s}' % value
    assert load_config(_write(tmp_path, text)) == TelegraphConfig()


def test_gpio_false_is_honoured(tmp_path: Path) -> None:
    assert load_config(_write(tmp_path, '{"Gpio": false}')).gpio is False
