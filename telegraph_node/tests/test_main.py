"""Tests for entry-point wiring that does not need hardware or a server."""

from __future__ import annotations

from pathlib import Path

import pytest

from telegraph_node import main as main_module
from telegraph_node.config import PinConfig, TelegraphConfig
from telegraph_node.gpio_io import SimKeyInput, SimSounderOutput


def test_parse_args_config_path() -> None:
    args = main_module.parse_args(["--config", "wire.json"])
    assert args.config == Path("wire.json")
    assert main_module.parse_args([]).config is None


def test_open_pins_without_gpio_uses_software_pins() -> None:
    key, sounder = main_module.open_pins(TelegraphConfig(gpio=False))
    assert isinstance(key, SimKeyInput)
    assert isinstance(sounder, SimSounderOutput)
    assert sounder.inverted_state is None


def test_open_pins_degrades_when_hardware_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    def _unavailable(*_args: object) -> None:
        raise RuntimeError("pigpio library is not available on this host")

    monkeypatch.setattr(main_module, "KeyInput", _unavailable)
    config = TelegraphConfig(pins=PinConfig(sounder_inverted=13))
    key, sounder = main_module.open_pins(config)
    assert isinstance(key, SimKeyInput)
    assert isinstance(sounder, SimSounderOutput)
    assert sounder.inverted_state is True
