"""Main entry-point for the internet telegraph node."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from .config import TelegraphConfig, load_config, resolve_config_path
from .connection import SocketClient
from .gpio_io import KeyInput, SimKeyInput, SimSounderOutput, SounderOutput
from .key_poller import KeyPoller
from .playback import STARTUP_BANNER, MorseSequencer
from .reconnect import ReconnectionPolicy
from .tone import SignalQueue, ToneDriver

LOGGER = logging.getLogger(__name__)
DIST_NAME = "internet-telegraph"


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Bridge a telegraph key and sounder to a shared Morse channel."
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration JSON (defaults to $TELEGRAPH_CONFIG_PATH or ./config.json).",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def _package_version() -> str:
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return "unknown"


def _install_signal_handlers(stop_flag: Dict[str, bool]) -> None:
    def handler(signum: int, _frame: object) -> None:
        _log_event("signal_received", signal=signum)
        stop_flag["stop"] = True

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            signal.signal(sig, handler)
        except ValueError:  # pragma: no cover - not available on all platforms
            continue


def open_pins(config: TelegraphConfig) -> Tuple[Any, Any]:
    """Open the key and sounder, degrading to software pins on failure."""
    pins = config.pins
    if config.gpio:
        try:
            return KeyInput(pins.key), SounderOutput(pins.sounder, pins.sounder_inverted)
        except RuntimeError as exc:
            _log_event("gpio_init_failed", error=str(exc))
    return SimKeyInput(), SimSounderOutput(inverted=pins.sounder_inverted is not None)


def run(config: TelegraphConfig) -> None:
    stop_flag = {"stop": False}
    _install_signal_handlers(stop_flag)

    key, sounder = open_pins(config)
    queue = SignalQueue()
    driver = ToneDriver(queue, sounder)
    driver.start()

    sequencer = MorseSequencer(queue)
    client = SocketClient(config, queue)
    policy = ReconnectionPolicy(client, sequencer.play)
    poller = KeyPoller(key, queue, client, policy)

    try:
        if client.dial():
            sequencer.play(STARTUP_BANNER)
        poller.run(stop_flag)
    finally:
        client.close()
        queue.close()
        driver.join(timeout=1.0)
        sounder.close()
        key.close()
        _log_event("telegraph_stopped")


def main(argv: Optional[Iterable[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    _log_event("telegraph_starting", version=_package_version())

    config = load_config(resolve_config_path(args.config))
    logging.getLogger().setLevel(
        getattr(logging, config.log_level.upper(), logging.INFO)
    )

    try:
        run(config)
    except KeyboardInterrupt:
        _log_event("keyboard_interrupt")
    except Exception as exc:  # pragma: no cover - top-level guard
        _log_event("fatal_error", error=str(exc))
        raise


if __name__ == "__main__":
    main(sys.argv[1:])
