from __future__ import annotations

import time


def now_ms() -> int:
    """Wall clock in epoch milliseconds (the unit clients receive deadlines in)."""
    return int(time.time() * 1000)
