"""Redial schedule driven once per control-loop tick while offline."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable

from .connection import CONNECTED, RECONNECTING, SocketClient
from .playback import ACKNOWLEDGE, ATTENTION

LOGGER = logging.getLogger(__name__)


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


@dataclass(frozen=True)
class BackoffSchedule:
    """Immediate retries first, then one dial every ``slow_interval`` ticks.

    With the defaults the dial counts are 1, 2, 3, 503, 1003, ...; at a 10 ms
    tick the slow cadence is about once every five seconds.
    """

    immediate_retries: int = 2
    slow_interval: int = 500
    slow_phase: int = 3

    def should_dial(self, count: int) -> bool:
        if count <= 0:
            return False
        if count <= self.immediate_retries:
            return True
        return count >= self.slow_phase and (count - self.slow_phase) % self.slow_interval == 0

    def is_slow(self, count: int) -> bool:
        return count > self.immediate_retries


class ReconnectionPolicy:
    """Counts consecutive offline ticks and decides when to dial."""

    def __init__(
        self,
        client: SocketClient,
        play: Callable[[str], None],
        schedule: BackoffSchedule = BackoffSchedule(),
        attention_at: int = 100,
    ) -> None:
        self._client = client
        self._play = play
        self._schedule = schedule
        self._attention_at = attention_at

    def tick(self) -> None:
        client = self._client
        client.redial_count += 1
        client.status = RECONNECTING
        count = client.redial_count

        if self._schedule.should_dial(count):
            slow = self._schedule.is_slow(count)
            if slow:
                _log_event("redial_slow", redial_count=count)
            if client.dial() and slow:
                # connection restored after a prolonged outage
                self._play(ACKNOWLEDGE)

        if client.status == CONNECTED:
            client.redial_count = 0

        if client.redial_count == self._attention_at:
            _log_event("prolonged_outage", redial_count=client.redial_count)
            self._play(ATTENTION)


__all__ = ["BackoffSchedule", "ReconnectionPolicy"]
