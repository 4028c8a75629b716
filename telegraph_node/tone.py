"""Signal queue and the thread that owns the sounder output."""

from __future__ import annotations

import json
import logging
import threading
from collections import deque
from typing import Deque, Optional, Protocol

LOGGER = logging.getLogger(__name__)


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


class Sounder(Protocol):
    def write(self, on: bool) -> None:
        ...


class SignalQueue:
    """Unbounded FIFO of tone commands; many producers, one consumer."""

    def __init__(self) -> None:
        self._queue: Deque[bool] = deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._closed = False

    def put(self, on: bool) -> None:
        with self._lock:
            if self._closed:
                return
            self._queue.append(bool(on))
            self._not_empty.notify()

    def get(self) -> Optional[bool]:
        """Block for the next command; ``None`` once closed and drained."""
        with self._lock:
            while not self._queue and not self._closed:
                self._not_empty.wait()
            if not self._queue:
                return None
            return self._queue.popleft()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._not_empty.notify_all()

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)


class ToneDriver:
    """Applies queued commands to the sounder strictly in arrival order."""

    def __init__(self, queue: SignalQueue, sounder: Sounder) -> None:
        self._queue = queue
        self._sounder = sounder
        self._last_command = False
        self._thread = threading.Thread(target=self._run, name="tone-driver", daemon=True)

    @property
    def last_command(self) -> bool:
        return self._last_command

    def start(self) -> None:
        self._thread.start()
        _log_event("tone_driver_started")

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout=timeout)

    def _run(self) -> None:
        while True:
            command = self._queue.get()
            if command is None:
                _log_event("tone_driver_stopped")
                return
            try:
                self._sounder.write(command)
            except Exception as exc:
                _log_event("sounder_write_error", command=command, error=str(exc))
                continue
            self._last_command = command


__all__ = ["SignalQueue", "Sounder", "ToneDriver"]
