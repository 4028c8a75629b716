"""Websocket session to the channel server."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Optional

from websockets.exceptions import WebSocketException
from websockets.sync.client import connect as ws_connect

from .config import TelegraphConfig
from .protocol import parse_inbound
from .tone import SignalQueue

LOGGER = logging.getLogger(__name__)

NOT_STARTED = "not started"
CONNECTED = "connected"
DISCONNECTED = "disconnected"
RECONNECTING = "reconnecting"

ORIGIN = "http://localhost"
OPEN_TIMEOUT_S = 10.0
RECV_POLL_S = 0.5

Connector = Callable[..., Any]


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


class SocketClient:
    """Owns at most one live session and relays inbound key events."""

    def __init__(
        self,
        config: TelegraphConfig,
        queue: SignalQueue,
        connect: Connector = ws_connect,
    ) -> None:
        self.url = config.url
        self.status = NOT_STARTED
        self.redial_count = 0
        self._queue = queue
        self._connect = connect
        self._conn: Optional[Any] = None
        self._lock = threading.Lock()
        self._listener: Optional[threading.Thread] = None

    @property
    def connected(self) -> bool:
        return self.status == CONNECTED

    def dial(self) -> bool:
        """Open a new session; failures are logged and reported as ``False``."""
        _log_event("dialing", url=self.url)
        try:
            conn = self._connect(self.url, origin=ORIGIN, open_timeout=OPEN_TIMEOUT_S)
        except (OSError, ValueError, WebSocketException) as exc:
            with self._lock:
                if self.status != NOT_STARTED:
                    self.status = DISCONNECTED
            _log_event("dial_failed", url=self.url, error=str(exc))
            return False

        with self._lock:
            self._conn = conn
            self.status = CONNECTED
            self.redial_count = 0
        _log_event("connected", url=self.url)

        self._listener = threading.Thread(
            target=self.listen, args=(conn,), name="socket-listen", daemon=True
        )
        self._listener.start()
        return True

    def send_msg(self, text: str) -> bool:
        LOGGER.debug("sending %s", text)
        with self._lock:
            conn = self._conn
        if conn is None:
            self._mark_disconnected(None, "no session")
            return False
        try:
            conn.send(text)
        except (OSError, WebSocketException) as exc:
            self._mark_disconnected(conn, str(exc))
            return False
        return True

    def listen(self, conn: Any) -> None:
        """Relay inbound messages from ``conn`` until it stops being current."""
        _log_event("listening", url=self.url)
        while self._is_current(conn):
            try:
                message = conn.recv(timeout=RECV_POLL_S)
            except TimeoutError:
                continue
            except (OSError, WebSocketException) as exc:
                self._mark_disconnected(conn, str(exc))
                break
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            LOGGER.debug("received %s", message)
            command = parse_inbound(message)
            if command is not None:
                self._queue.put(command)
        LOGGER.error(json.dumps({"event": "listen_stopped", "url": self.url}))

    def close(self) -> None:
        with self._lock:
            conn = self._conn
            self._conn = None
            self.status = DISCONNECTED
        if conn is None:
            return
        try:
            conn.close()
        except (OSError, WebSocketException) as exc:  # pragma: no cover
            _log_event("close_error", error=str(exc))

    # Internal -----------------------------------------------------------------

    def _is_current(self, conn: Any) -> bool:
        with self._lock:
            return self._conn is conn and self.status == CONNECTED

    def _mark_disconnected(self, conn: Optional[Any], reason: str) -> None:
        with self._lock:
            if conn is not self._conn:
                return
            self.status = DISCONNECTED
        _log_event("disconnected", url=self.url, reason=reason)


__all__ = [
    "CONNECTED",
    "DISCONNECTED",
    "NOT_STARTED",
    "RECONNECTING",
    "SocketClient",
]
