# app/services/section_timer.py
"""
Section timer.

Remaining time is always re-derived from the authoritative start timestamp
and the current time; nothing here counts down. A client that reconnects
after the deadline gets the same answer as one that kept ticking.
"""

from typing import Optional

from app.core.clock import NANOS_PER_MILLI, minutes_to_ns


def deadline_ns(started_at_ns: int, duration_minutes: int) -> int:
    return started_at_ns + minutes_to_ns(duration_minutes)


def remaining_ms(
    started_at_ns: Optional[int], duration_minutes: int, now_ns: int
) -> Optional[int]:
    """
    Remaining milliseconds for a section, never negative.
    Returns None when the section has no start timestamp (timer not running).
    """
    if started_at_ns is None:
        return None
    left = deadline_ns(started_at_ns, duration_minutes) - now_ns
    if left <= 0:
        return 0
    # round up so a section never shows 0 ms while still open
    return -(-left // NANOS_PER_MILLI)


def is_expired(started_at_ns: Optional[int], duration_minutes: int, now_ns: int) -> bool:
    if started_at_ns is None:
        return False
    return now_ns >= deadline_ns(started_at_ns, duration_minutes)


def elapsed_ns(started_at_ns: int, submitted_at_ns: int, duration_minutes: int) -> int:
    """Time spent in a section, capped at the section duration."""
    spent = max(0, submitted_at_ns - started_at_ns)
    return min(spent, minutes_to_ns(duration_minutes))


class SectionTimer:
    """
    Advisory timer for one section.

    `should_auto_submit` answers True exactly once: on the first check after
    the deadline while the section is still unsubmitted. Checks after that
    (or after `mark_submitted`) are no-ops.
    """

    def __init__(
        self,
        started_at_ns: Optional[int],
        duration_minutes: int,
        submitted: bool = False,
    ):
        self.started_at_ns = started_at_ns
        self.duration_minutes = duration_minutes
        self.submitted = submitted

    @classmethod
    def for_section(cls, attempt_section, test_section) -> "SectionTimer":
        return cls(
            started_at_ns=attempt_section.started_at,
            duration_minutes=test_section.duration_minutes,
            submitted=attempt_section.submitted_at is not None,
        )

    @property
    def is_running(self) -> bool:
        return self.started_at_ns is not None and not self.submitted

    @property
    def deadline_ns(self) -> Optional[int]:
        if self.started_at_ns is None:
            return None
        return deadline_ns(self.started_at_ns, self.duration_minutes)

    def remaining_ms(self, now_ns: int) -> Optional[int]:
        return remaining_ms(self.started_at_ns, self.duration_minutes, now_ns)

    def is_expired(self, now_ns: int) -> bool:
        return is_expired(self.started_at_ns, self.duration_minutes, now_ns)

    def should_auto_submit(self, now_ns: int) -> bool:
        if not self.is_running:
            return False
        if not self.is_expired(now_ns):
            return False
        self.submitted = True
        return True

    def mark_submitted(self) -> None:
        self.submitted = True

    def snapshot(self, now_ns: int) -> dict:
        return {
            "started_at": self.started_at_ns,
            "deadline": self.deadline_ns,
            "duration_minutes": self.duration_minutes,
            "remaining_ms": self.remaining_ms(now_ns),
            "running": self.is_running,
            "expired": self.is_expired(now_ns),
            "submitted": self.submitted,
            "server_time": now_ns,
        }
