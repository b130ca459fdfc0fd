# app/client/section_watcher.py
import logging
import threading
from typing import Callable, List, Optional

from app.core.clock import Clock, now_ns
from app.core.config import settings
from app.core.decorator import GuardViolation, ServiceUnavailable
from app.services.section_timer import SectionTimer

logger = logging.getLogger(__name__)

# the section is already closed on the server, nothing left to submit
_ALREADY_CLOSED = {"section_already_submitted", "attempt_completed"}


class SectionWatcher:
    """
    Client-side countdown for one active section.

    Every tick re-derives the remaining time from the server's start timestamp,
    so a watcher created after a reconnect sees the same deadline. When the
    deadline passes the current answers are submitted exactly once. Cancel with
    `cancel()`; the loop also ends after submission.
    """

    def __init__(
        self,
        client,
        attempt_id: int,
        section_number: int,
        started_at_ns: int,
        duration_minutes: int,
        answers_provider: Callable[[], List[dict]],
        clock: Clock = now_ns,
        tick_seconds: Optional[float] = None,
        on_tick: Optional[Callable[[int], None]] = None,
    ):
        self.client = client
        self.attempt_id = attempt_id
        self.section_number = section_number
        self.answers_provider = answers_provider
        self.clock = clock
        self.tick_seconds = (
            tick_seconds if tick_seconds is not None else settings.client_tick_seconds
        )
        self.on_tick = on_tick
        self.timer = SectionTimer(started_at_ns, duration_minutes)
        self.result: Optional[dict] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_server(
        cls,
        client,
        attempt_id: int,
        section_number: int,
        answers_provider: Callable[[], List[dict]],
        clock: Clock = now_ns,
        **kwargs,
    ) -> "SectionWatcher":
        """Build a watcher from the server timer, correcting for local clock skew."""
        snapshot = client.get_section_timer(attempt_id, section_number)
        if snapshot["started_at"] is None:
            raise GuardViolation(
                f"Section {section_number} has not been started", "section_not_active"
            )

        offset = snapshot["server_time"] - clock()
        watcher = cls(
            client,
            attempt_id,
            section_number,
            snapshot["started_at"],
            snapshot["duration_minutes"],
            answers_provider,
            clock=lambda: clock() + offset,
            **kwargs,
        )
        if snapshot["submitted"]:
            watcher.timer.mark_submitted()
        return watcher

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def remaining_ms(self) -> Optional[int]:
        return self.timer.remaining_ms(self.clock())

    def tick(self) -> bool:
        """
        One timer check. Returns True once the section has been auto-submitted.
        A submit that fails transiently is retried on the next tick.
        """
        now = self.clock()
        if self.on_tick is not None:
            self.on_tick(self.timer.remaining_ms(now))

        if not self.timer.should_auto_submit(now):
            return False

        logger.info(
            f"Attempt {self.attempt_id}: section {self.section_number} time is up, submitting"
        )
        try:
            self.result = self.client.submit_section(
                self.attempt_id, self.section_number, self.answers_provider()
            )
        except ServiceUnavailable as e:
            self.timer.submitted = False
            logger.warning(
                f"Attempt {self.attempt_id}: auto-submit of section {self.section_number} "
                f"failed, retrying next tick ({e.message})"
            )
            return False
        except GuardViolation as e:
            if e.code not in _ALREADY_CLOSED:
                raise
            logger.info(
                f"Attempt {self.attempt_id}: section {self.section_number} already closed ({e.code})"
            )
        finally:
            if self.timer.submitted:
                self._stop.set()
        return True

    def mark_submitted(self) -> None:
        """The student submitted manually; stop without submitting again."""
        self.timer.mark_submitted()
        self._stop.set()

    def cancel(self) -> None:
        self._stop.set()

    def run(self) -> None:
        while not self._stop.is_set():
            if self.tick():
                break
            self._stop.wait(self.tick_seconds)

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(
            target=self.run,
            name=f"section-watcher-{self.attempt_id}-{self.section_number}",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)
