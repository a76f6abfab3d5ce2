"""Wall-clock helpers.

Expiry timestamps are persisted in cache files and must survive a
restart, so they use wall-clock epoch milliseconds rather than
time.monotonic().
"""

from __future__ import annotations

import time


def now_ms() -> int:
    return int(time.time() * 1000)


def expires_at_ms(ttl_seconds: float) -> int:
    return now_ms() + int(float(ttl_seconds) * 1000)


def is_expired(expires_at: int) -> bool:
    return now_ms() >= expires_at
