"""
Reminder scheduling
━━━━━━━━━━━━━━━━━━━

Every ``interval`` seconds the engine compares the wall clock with each
category's times-of-day. A slot is due from one minute before its
scheduled time until one minute after, and each (category, date, time)
slot fires once.
"""
from __future__ import annotations
import datetime, logging, random, threading
from typing import Callable, NamedTuple, Optional, Protocol

from .messages import MessagePool, ReminderMessage

log = logging.getLogger(__name__)

ScheduleTable = dict[str, tuple[datetime.time, ...]]

POLL_INTERVAL = 30   # seconds


class FiredKey(NamedTuple):
    category: str
    date: datetime.date
    time: datetime.time


class Presenter(Protocol):
    def notify(self, body: str, attribution: str) -> None: ...


def parse_time(s: str) -> datetime.time:
    """Parse time string (HH:MM) to datetime.time. Raises ValueError if invalid."""
    h, m = str(s).strip().split(":")
    return datetime.time(int(h), int(m))


def format_12h(t: datetime.time) -> str:
    """'14:30' -> '2:30 PM'."""
    suffix = "AM" if t.hour < 12 else "PM"
    h12 = t.hour % 12 or 12
    return f"{h12}:{t.minute:02d} {suffix}"


def check_schedule(schedule: ScheduleTable, now: datetime.datetime,
                   fired: set[FiredKey]) -> list[FiredKey]:
    """Return the slots due at ``now`` and record them in ``fired``.

    A slot is due when now falls in [T - 1 min, T + 1 min).
    """
    due = []
    for category, times in schedule.items():
        for t in times:
            key = FiredKey(category, now.date(), t)
            if key in fired:
                continue
            delta = (datetime.datetime.combine(now.date(), t) - now).total_seconds() / 60
            if -1 < delta <= 1:
                fired.add(key)
                due.append(key)
    return due


def next_reminder(times: tuple[datetime.time, ...], now: datetime.time) -> datetime.time:
    """Earliest time after ``now``, wrapping to tomorrow's first one."""
    ordered = sorted(times)
    for t in ordered:
        if t > now:
            return t
    return ordered[0]


def next_reminders(schedule: ScheduleTable, now: datetime.time) -> dict[str, datetime.time]:
    return {cat: next_reminder(times, now) for cat, times in schedule.items()}


class ReminderEngine:
    """Background polling loop that turns due slots into notifications."""

    def __init__(self, schedule: ScheduleTable, messages: MessagePool, notifier: Presenter,
                 interval: float = POLL_INTERVAL, rng: Optional[random.Random] = None,
                 clock: Callable[[], datetime.datetime] = datetime.datetime.now):
        self.schedule = schedule
        self.messages = messages
        self.notifier = notifier
        self.interval = interval
        self.clock = clock
        self.fired: set[FiredKey] = set()
        self._rng = rng or random.Random()
        self._rng_lock = threading.Lock()
        self._last_reset: Optional[datetime.date] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ━━━ Scheduling ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def tick(self, now: Optional[datetime.datetime] = None) -> list[FiredKey]:
        now = now or self.clock()
        if now.date() != self._last_reset:
            if self.fired:
                log.debug("New day %s, clearing %d fired slots", now.date(), len(self.fired))
            self.fired.clear()
            self._last_reset = now.date()

        due = check_schedule(self.schedule, now, self.fired)
        for key in due:
            log.info("%s reminder due (%s)", key.category, key.time.strftime("%H:%M"))
            self.fire(key.category, now)
        return due

    def fire(self, category: str, now: Optional[datetime.datetime] = None) -> Optional[ReminderMessage]:
        """Show a random message from ``category``. No-op if it has none."""
        pool = self.messages.get(category)
        if not pool:
            log.debug("No messages for %s, skipping notification", category)
            return None
        with self._rng_lock:
            msg = self._rng.choice(pool)
        now = now or self.clock()
        self.notifier.notify(msg.text, f"{msg.kind} | {format_12h(now.time())}")
        return msg

    # ━━━ Loop ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def run(self) -> None:
        log.info("Reminder loop started (every %ss)", self.interval)
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception:
                log.exception("Reminder check failed")
            if self._stop.wait(self.interval):
                break
        log.info("Reminder loop stopped")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="reminder-loop", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 2.0) -> None:
        self._stop.set()
        t = self._thread
        if t is not None and t is not threading.current_thread():
            t.join(timeout)
        self._thread = None
