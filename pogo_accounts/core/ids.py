"""24-character hex record identifiers.

Identifiers follow the ObjectId layout: a 4-byte big-endian unix timestamp,
a 5-byte value chosen once per process and a 3-byte wrapping counter.
"""

from __future__ import annotations

import itertools
import os
import random
import threading
import time
from typing import Any

OBJECT_ID_LENGTH = 24

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_PROCESS_UNIQUE = os.urandom(5)
_counter = itertools.count(random.randint(0, 0xFFFFFF))
_lock = threading.Lock()


def new_object_id() -> str:
    """Return a fresh identifier as lowercase hex."""

    with _lock:
        count = next(_counter) & 0xFFFFFF
    raw = (
        int(time.time()).to_bytes(4, "big")
        + _PROCESS_UNIQUE
        + count.to_bytes(3, "big")
    )
    return raw.hex()


def is_valid_object_id(value: Any) -> bool:
    """True when ``value`` is a 24-character hex string."""

    return (
        isinstance(value, str)
        and len(value) == OBJECT_ID_LENGTH
        and all(char in _HEX_DIGITS for char in value)
    )


__all__ = ["OBJECT_ID_LENGTH", "is_valid_object_id", "new_object_id"]
