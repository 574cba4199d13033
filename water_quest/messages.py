"""Reminder message catalog."""
from __future__ import annotations
import json, logging, os
from dataclasses import dataclass

log = logging.getLogger(__name__)

MessagePool = dict[str, tuple["ReminderMessage", ...]]


@dataclass(frozen=True)
class ReminderMessage:
    text: str
    kind: str
    category: str


def load_messages(path: str, key: str = "messages") -> MessagePool:
    """Load the catalog at ``path`` grouped by category, in file order.

    Expects ``{"messages": [{"message": ..., "type": ..., "category": ...}]}``.
    Any problem with the file yields an empty pool; bad entries are skipped.
    """
    if not os.path.exists(path):
        log.warning("Message catalog %s not found, no reminders will show.", path)
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, IOError, OSError) as e:
        log.warning("Message catalog load error: %s", e)
        return {}

    entries = data.get(key) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        log.warning("Message catalog %s has no %r list.", path, key)
        return {}

    grouped: dict[str, list[ReminderMessage]] = {}
    for i, e in enumerate(entries):
        if not isinstance(e, dict) or not all(isinstance(e.get(k), str) for k in ("message", "type", "category")):
            log.warning("Skipping malformed message #%d in %s", i, path)
            continue
        msg = ReminderMessage(text=e["message"], kind=e["type"], category=e["category"])
        grouped.setdefault(msg.category, []).append(msg)

    log.debug("Loaded %d messages in %d categories", sum(map(len, grouped.values())), len(grouped))
    return {cat: tuple(msgs) for cat, msgs in grouped.items()}
