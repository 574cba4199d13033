"""Config file handling: JSON in the home directory, merged over defaults."""
from __future__ import annotations
import datetime, json, logging, os
from typing import Any, Optional

from .scheduler import ScheduleTable, parse_time

log = logging.getLogger(__name__)

# ─── Paths ────────────────────────────────────────────────────
CONFIG_FILE   = os.path.join(os.path.expanduser("~"), "water_quest_config.json")
WORKOUTS_FILE = os.path.join(os.path.expanduser("~"), "water_quest_workouts.json")
LOG_FILE      = os.path.join(os.path.expanduser("~"), "water_quest.log")
LOCK_FILE     = os.path.join(os.path.expanduser("~"), ".water_quest.lock")
PACKAGED_MESSAGES = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "messages.json")

TEST_POLL_INTERVAL = 5   # seconds, used by --test

DEFAULT_CONFIG = {
    "schedule": {
        "Hydration": ["08:00", "10:00", "12:00", "14:00", "16:00", "18:00"],
        "Workout":   ["22:00", "23:00"],
        "Russian":   ["09:00", "13:00", "17:00"],
        "CTF":       ["19:00", "20:00"],
        "Sleep":     ["23:30", "23:40", "23:50", "00:00"],
    },
    "exercises": ["Push-ups", "Squats", "Jumping Jacks", "Abs", "Advanced Squats"],
    "poll_interval": 30,              # Seconds between schedule checks
    "notification_timeout": 10,       # Seconds a toast stays up
    "messages_file": None,            # None = packaged catalog
    "workouts_file": WORKOUTS_FILE,
    "log_file": LOG_FILE,
}


def load_config(path: str = CONFIG_FILE, test_mode: bool = False) -> dict[str, Any]:
    """Load config from file, falling back to defaults for missing/invalid values."""
    cfg = json.loads(json.dumps(DEFAULT_CONFIG))
    if os.path.exists(path):
        try:
            with open(path, encoding="utf-8") as f:
                user_cfg = json.load(f)
            if isinstance(user_cfg, dict):
                cfg.update(user_cfg)
            else:
                log.warning("Config %s is not a JSON object. Using defaults.", path)
        except (json.JSONDecodeError, IOError, OSError) as e:
            log.warning("Config load error: %s. Using defaults.", e)

    if test_mode:
        cfg["poll_interval"] = TEST_POLL_INTERVAL

    for key, min_val, default in [
        ("poll_interval", 1, 30),
        ("notification_timeout", 1, 10),
    ]:
        val = cfg.get(key)
        if isinstance(val, bool) or not isinstance(val, (int, float)) or val < min_val:
            cfg[key] = default

    ex = cfg.get("exercises")
    if not isinstance(ex, list) or not ex or not all(isinstance(e, str) and e for e in ex):
        cfg["exercises"] = list(DEFAULT_CONFIG["exercises"])

    for key in ("workouts_file", "log_file"):
        if not isinstance(cfg.get(key), str) or not cfg[key]:
            cfg[key] = DEFAULT_CONFIG[key]
    if not isinstance(cfg.get("messages_file"), str) or not cfg["messages_file"]:
        cfg["messages_file"] = None
    for key in ("workouts_file", "log_file", "messages_file"):
        if cfg[key]:
            cfg[key] = os.path.expanduser(cfg[key])

    return cfg


def save_config(cfg: dict[str, Any], path: str = CONFIG_FILE) -> None:
    """Save config to file."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cfg, f, indent=2)
    except (IOError, OSError) as e:
        log.error("Config save error: %s", e)


def ensure_config(path: str = CONFIG_FILE) -> None:
    """Write the default config on first run so there is a file to edit."""
    if os.path.exists(path):
        return
    save_config(DEFAULT_CONFIG, path)
    if os.path.exists(path):
        log.info("Wrote default config to %s", path)


def messages_path(cfg: dict[str, Any]) -> str:
    return cfg.get("messages_file") or PACKAGED_MESSAGES


def build_schedule(cfg: dict[str, Any]) -> ScheduleTable:
    """Turn the ``schedule`` config entry into a category -> times table.

    Bad times are dropped, as are categories left with no valid time. If
    nothing usable is left the default table is used instead.
    """
    raw = cfg.get("schedule")
    table = _schedule_from(raw) if isinstance(raw, dict) else {}
    if not table:
        if raw != DEFAULT_CONFIG["schedule"]:
            log.warning("No usable schedule in config. Using the default schedule.")
        table = _schedule_from(DEFAULT_CONFIG["schedule"])
    return table


def _schedule_from(raw: dict) -> ScheduleTable:
    table: ScheduleTable = {}
    for category, times in raw.items():
        if not isinstance(times, list):
            log.warning("Schedule for %r is not a list, skipping.", category)
            continue
        parsed: list[datetime.time] = []
        for t in times:
            try:
                tt = parse_time(t)
            except (ValueError, TypeError):
                log.warning("Invalid time %r for %s, skipping.", t, category)
                continue
            if tt not in parsed:
                parsed.append(tt)
        if parsed:
            table[str(category)] = tuple(parsed)
        else:
            log.warning("Category %s has no valid times, dropping it.", category)
    return table


def config_path(override: Optional[str]) -> str:
    return os.path.expanduser(override) if override else CONFIG_FILE
