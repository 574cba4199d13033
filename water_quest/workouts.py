"""Workout log: one record per day, stored as a JSON array."""
from __future__ import annotations
import datetime, json, logging, os, tempfile, threading
from dataclasses import dataclass, field
from typing import Any, Optional

log = logging.getLogger(__name__)

MAX_REPS = 1000   # upper bound of the form's spinboxes

_path_locks: dict[str, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: str) -> threading.Lock:
    key = os.path.abspath(path)
    with _path_locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


@dataclass
class WorkoutRecord:
    date: datetime.date
    exercises: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.exercises.values())

    def to_json(self) -> dict[str, Any]:
        stamp = datetime.datetime.combine(self.date, datetime.time())
        return {"Date": stamp.isoformat(), "Exercises": dict(self.exercises)}

    @classmethod
    def from_json(cls, data: Any) -> "WorkoutRecord":
        """Build a record from its JSON form. Raises ValueError if malformed."""
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        raw_date, raw_ex = data.get("Date"), data.get("Exercises")
        if not isinstance(raw_date, str):
            raise ValueError("missing Date")
        date = datetime.datetime.fromisoformat(raw_date.strip()).date()
        if raw_ex is None:
            raw_ex = {}
        if not isinstance(raw_ex, dict):
            raise ValueError("Exercises must be an object")
        exercises = {}
        for name, count in raw_ex.items():
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError(f"bad count for {name!r}: {count!r}")
            exercises[str(name)] = count
        return cls(date, exercises)


@dataclass(frozen=True)
class HistorySummary:
    days: int
    total_reps: int
    mean_reps: float


class WorkoutStore:
    """Read/write the workout file at ``path``.

    Loads never raise: a missing or unreadable file is an empty history.
    Saves rewrite the whole file through a temp file and ``os.replace``.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = _lock_for(path)

    def load(self) -> list[WorkoutRecord]:
        with self._lock:
            return self._load()

    def save(self, record: WorkoutRecord) -> None:
        """Insert ``record``, replacing any existing record for the same date."""
        with self._lock:
            records = [r for r in self._load() if r.date != record.date]
            records.append(record)
            self._write(records)
        log.info("Saved workout for %s (%d reps)", record.date.isoformat(), record.total)

    def _load(self) -> list[WorkoutRecord]:
        if not os.path.exists(self.path):
            log.debug("No workout file at %s", self.path)
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, IOError, OSError) as e:
            log.warning("Workout file %s unreadable: %s", self.path, e)
            return []
        if data is None:
            return []
        if not isinstance(data, list):
            log.warning("Workout file %s is not a JSON array", self.path)
            return []

        records = []
        for i, item in enumerate(data):
            try:
                records.append(WorkoutRecord.from_json(item))
            except ValueError as e:
                log.warning("Skipping workout entry #%d: %s", i, e)
        return records

    def _write(self, records: list[WorkoutRecord]) -> None:
        d = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(d, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".workouts-", suffix=".tmp", dir=d)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([r.to_json() for r in records], f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.remove(tmp)
            except OSError:
                pass
            raise


def summarize(records: list[WorkoutRecord]) -> HistorySummary:
    """Totals across ``records``. Raises ValueError when there are none."""
    if not records:
        raise ValueError("no workouts recorded")
    total = sum(r.total for r in records)
    return HistorySummary(days=len(records), total_reps=total, mean_reps=total / len(records))


def format_history(records: list[WorkoutRecord]) -> str:
    blocks = []
    for r in sorted(records, key=lambda r: r.date, reverse=True):
        lines = [f"Date: {r.date:%Y-%m-%d}"]
        lines += [f"{name}: {r.exercises[name]}" for name in sorted(r.exercises)]
        lines.append(f"Total: {r.total}")
        blocks.append("\n".join(lines))

    s = summarize(records)
    blocks.append("\n".join([
        f"Days recorded: {s.days}",
        f"Total reps: {s.total_reps}",
        f"Average per day: {s.mean_reps:.1f}",
    ]))
    return "\n\n".join(blocks) + "\n"


def build_record(date: datetime.date, counts: dict[str, Any]) -> WorkoutRecord:
    """Record from the form's raw spinbox values. Raises ValueError naming the bad field."""
    exercises = {}
    for name, raw in counts.items():
        try:
            n = int(str(raw).strip())
        except ValueError:
            raise ValueError(f"{name}: enter a whole number") from None
        if not 0 <= n <= MAX_REPS:
            raise ValueError(f"{name}: 0 to {MAX_REPS}")
        exercises[name] = n
    return WorkoutRecord(date, exercises)


def default_log_date(now: Optional[datetime.datetime] = None) -> datetime.date:
    """Before noon the form assumes you're logging last night's workout."""
    now = now or datetime.datetime.now()
    if now.hour < 12:
        return now.date() - datetime.timedelta(days=1)
    return now.date()
