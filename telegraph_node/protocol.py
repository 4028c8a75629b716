"""Wire format shared with the channel server."""

from __future__ import annotations

import time
from typing import Optional, Tuple

PING = "ping"
VERSION_TAG = "v2"
KEY_DOWN = "1"
KEY_UP = "0"


def microseconds() -> int:
    """Monotonic timestamp in whole microseconds."""
    return time.monotonic_ns() // 1000


def encode_key_event(pressed: bool, timestamp_us: int) -> str:
    token = KEY_DOWN if pressed else KEY_UP
    return f"{token}{int(timestamp_us)}{VERSION_TAG}"


def decode_key_event(text: str) -> Tuple[bool, int]:
    """Split a key event back into ``(pressed, timestamp_us)``."""
    if len(text) < 2 or text[0] not in (KEY_DOWN, KEY_UP):
        raise ValueError(f"not a key event: {text!r}")
    body = text[1:]
    if body.endswith(VERSION_TAG):
        body = body[: -len(VERSION_TAG)]
    if not body.isdigit():
        raise ValueError(f"bad timestamp in key event: {text!r}")
    return text[0] == KEY_DOWN, int(body)


def parse_inbound(text: str) -> Optional[bool]:
    """Map a relayed message to a tone command; ``None`` means ignore."""
    if not text:
        return None
    lead = text[0]
    if lead == KEY_DOWN:
        return True
    if lead == KEY_UP:
        return False
    return None


__all__ = [
    "KEY_DOWN",
    "KEY_UP",
    "PING",
    "VERSION_TAG",
    "decode_key_event",
    "encode_key_event",
    "microseconds",
    "parse_inbound",
]
