"""Scripted Morse playback onto the signal queue."""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, List, Tuple

from .tone import SignalQueue

LOGGER = logging.getLogger(__name__)

WPM = 13

STARTUP_BANNER = ".--. --- ... - ..... ----. ----."
ACKNOWLEDGE = ".."
ATTENTION = "........"

Step = Tuple[bool, int]


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


def dit_seconds(wpm: float) -> float:
    """Length of one dit, using the PARIS standard of 1200 ms per WPM."""
    if wpm <= 0:
        raise ValueError("wpm must be greater than zero")
    return 1.2 / wpm


def morse_elements(message: str) -> List[Step]:
    """Translate dits, dahs and spaces into ``(sound, units)`` steps.

    Each step is a tone command followed by a hold measured in dits. A dit is
    one unit on then one off, a dah three on then one off, and a space three
    units of silence. Any other character silences the sounder without a hold.
    """
    steps: List[Step] = []
    for symbol in message:
        if symbol == ".":
            steps += [(True, 1), (False, 1)]
        elif symbol == "-":
            steps += [(True, 3), (False, 1)]
        elif symbol == " ":
            steps.append((False, 3))
        else:
            steps.append((False, 0))
    return steps


class MorseSequencer:
    """Plays patterns synchronously on the calling thread."""

    def __init__(
        self,
        queue: SignalQueue,
        wpm: float = WPM,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._queue = queue
        self._dit_s = dit_seconds(wpm)
        self._sleep = sleep

    @property
    def dit_s(self) -> float:
        return self._dit_s

    def play(self, message: str) -> None:
        _log_event("playback", message=message)
        for sound, units in morse_elements(message):
            self._queue.put(sound)
            if units:
                self._sleep(units * self._dit_s)


__all__ = [
    "ACKNOWLEDGE",
    "ATTENTION",
    "MorseSequencer",
    "STARTUP_BANNER",
    "WPM",
    "dit_seconds",
    "morse_elements",
]
