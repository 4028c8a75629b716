"""Fixed-rate control loop sampling the telegraph key."""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, Dict, Protocol

from .connection import SocketClient
from .gpio_io import PRESSED, RELEASED
from .protocol import PING, encode_key_event, microseconds
from .reconnect import ReconnectionPolicy
from .tone import SignalQueue

LOGGER = logging.getLogger(__name__)

PERIOD_S = 0.010
KEEPALIVE_S = 30.0


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


class KeyReader(Protocol):
    def read(self) -> int:
        ...


class KeyPoller:
    """Edge-detects the key, drives the sounder and reports to the server."""

    def __init__(
        self,
        key: KeyReader,
        queue: SignalQueue,
        client: SocketClient,
        policy: ReconnectionPolicy,
        clock: Callable[[], int] = microseconds,
        period_s: float = PERIOD_S,
        keepalive_s: float = KEEPALIVE_S,
    ) -> None:
        if period_s <= 0.0:
            raise ValueError("period_s must be greater than zero")
        self._key = key
        self._queue = queue
        self._client = client
        self._policy = policy
        self._clock = clock
        self._period_s = period_s
        self._keepalive_ticks = max(1, int(round(keepalive_s / period_s)))
        self._last_level = RELEASED
        self._tick_count = 0

    @property
    def pressed(self) -> bool:
        return self._last_level == PRESSED

    def tick(self) -> None:
        """Run one iteration of the control loop (without the sleep)."""
        if not self._client.connected:
            self._policy.tick()

        level = self._key.read()
        if level != self._last_level:
            self._last_level = level
            pressed = level == PRESSED
            # the server does not echo our own key, so sound it locally
            self._queue.put(pressed)
            self._client.send_msg(encode_key_event(pressed, self._clock()))

        if self._tick_count % self._keepalive_ticks == 0:
            self._client.send_msg(PING)
        self._tick_count += 1

    def run(self, stop_flag: Dict[str, bool]) -> None:
        _log_event("key_poller_started", period_s=self._period_s)
        next_tick = time.monotonic()
        while not stop_flag["stop"]:
            self.tick()
            next_tick += self._period_s
            sleep_time = next_tick - time.monotonic()
            if sleep_time > 0:
                time.sleep(sleep_time)
            elif sleep_time < -self._period_s:
                # fell behind (e.g. during playback); resume from now
                next_tick = time.monotonic()
        _log_event("key_poller_stopped", ticks=self._tick_count)


__all__ = ["KeyPoller", "KEEPALIVE_S", "PERIOD_S"]
