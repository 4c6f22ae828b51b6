"""Time-ordered unique identifiers (ULID) for seatmanager records."""

import secrets
import threading
import time
from typing import Callable, Optional

from ulid import ULID

RANDOM_BITS = 80
_MAX_RANDOM = (1 << RANDOM_BITS) - 1


class MonotonicULIDGenerator:
    """Generate ULIDs that sort in generation order.

    Within the same millisecond (or if the clock steps backwards) the random
    component is the previous one plus one, so two ids generated in sequence
    never compare out of order.
    """

    def __init__(self, clock_ms: Optional[Callable[[], int]] = None):
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_random = 0

    def new(self) -> str:
        with self._lock:
            now_ms = self._clock_ms()
            if now_ms <= self._last_ms:
                now_ms = self._last_ms
                random_part = self._last_random + 1
                if random_part > _MAX_RANDOM:
                    # Random space for this millisecond is exhausted
                    now_ms += 1
                    random_part = secrets.randbits(RANDOM_BITS)
            else:
                random_part = secrets.randbits(RANDOM_BITS)

            self._last_ms = now_ms
            self._last_random = random_part

        raw = now_ms.to_bytes(6, "big") + random_part.to_bytes(10, "big")
        return str(ULID.from_bytes(raw))


_default_generator = MonotonicULIDGenerator()


def generate_id() -> str:
    """Return a new ULID string from the process-wide generator."""
    return _default_generator.new()
