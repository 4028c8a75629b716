"""Telegraph key and sounder pins using pigpio."""

from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Tuple

try:
    import pigpio  # type: ignore
except ImportError:  # pragma: no cover - pigpio unavailable on non-Pi hosts
    pigpio = None  # type: ignore

LOGGER = logging.getLogger(__name__)

RELEASED = 1
PRESSED = 0


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


def _connect() -> "pigpio.pi":
    if pigpio is None:
        raise RuntimeError("pigpio library is not available on this host")
    pi = pigpio.pi()
    if not pi.connected:  # pragma: no cover - requires hardware fault
        raise RuntimeError("Unable to establish connection to pigpio daemon")
    return pi


class KeyInput:
    """Telegraph key on a pulled-up input pin; pressing pulls it low."""

    def __init__(self, pin: int) -> None:
        self._pin = pin
        self._pi = _connect()
        self._pi.set_mode(self._pin, pigpio.INPUT)
        self._pi.set_pull_up_down(self._pin, pigpio.PUD_UP)
        _log_event("key_input_started", pin=self._pin)

    def read(self) -> int:
        return int(self._pi.read(self._pin))

    def close(self) -> None:
        self._pi.stop()
        _log_event("key_input_stopped")


class SounderOutput:
    """Active-high sounder pin with an optional active-low complement."""

    def __init__(self, pin: int, inverted_pin: Optional[int] = None) -> None:
        self._pin = pin
        self._inverted_pin = inverted_pin
        self._pi = _connect()
        self._pi.set_mode(self._pin, pigpio.OUTPUT)
        if self._inverted_pin is not None:
            self._pi.set_mode(self._inverted_pin, pigpio.OUTPUT)
        self.write(False)
        _log_event("sounder_started", pin=self._pin, inverted_pin=self._inverted_pin)

    def write(self, on: bool) -> None:
        self._pi.write(self._pin, 1 if on else 0)
        if self._inverted_pin is not None:
            self._pi.write(self._inverted_pin, 0 if on else 1)

    def close(self) -> None:
        """Silence the sounder and release the pigpio connection."""
        self.write(False)
        self._pi.stop()
        _log_event("sounder_stopped")


class SimKeyInput:
    """Software key replaying scripted levels, then holding the last one."""

    def __init__(self, levels: Optional[Iterable[int]] = None) -> None:
        self._levels = iter(tuple(levels) if levels is not None else (RELEASED,))
        self._last = RELEASED
        _log_event("key_input_sim_started")

    def read(self) -> int:
        self._last = int(next(self._levels, self._last))
        return self._last

    def close(self) -> None:
        _log_event("key_input_sim_stopped")


class SimSounderOutput:
    """Software sounder recording every write."""

    def __init__(self, inverted: bool = False) -> None:
        self.writes: List[Tuple[bool, Optional[bool]]] = []
        self.state = False
        self.inverted_state: Optional[bool] = True if inverted else None
        _log_event("sounder_sim_started", inverted=inverted)

    def write(self, on: bool) -> None:
        self.state = bool(on)
        if self.inverted_state is not None:
            self.inverted_state = not self.state
        self.writes.append((self.state, self.inverted_state))
        LOGGER.debug("sim sounder %s", "on" if self.state else "off")

    def close(self) -> None:
        self.write(False)
        _log_event("sounder_sim_stopped")


__all__ = [
    "KeyInput",
    "PRESSED",
    "RELEASED",
    "SimKeyInput",
    "SimSounderOutput",
    "SounderOutput",
]
