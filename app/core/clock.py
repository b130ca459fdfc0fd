"""
Authoritative clock.
All attempt timestamps are integer nanoseconds since the Unix epoch and are
issued here, never taken from the client.
"""

import time
from typing import Callable

Clock = Callable[[], int]

NANOS_PER_MILLI = 1_000_000
NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MINUTE = 60 * NANOS_PER_SECOND


def now_ns() -> int:
    return time.time_ns()


def minutes_to_ns(minutes: int) -> int:
    return minutes * NANOS_PER_MINUTE


def seconds_to_ns(seconds: int) -> int:
    return seconds * NANOS_PER_SECOND


def ns_to_ms(nanos: int) -> int:
    return nanos // NANOS_PER_MILLI
