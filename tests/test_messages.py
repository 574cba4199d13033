import json

import pytest

from water_quest.config import PACKAGED_MESSAGES
from water_quest.messages import ReminderMessage, load_messages


def write(tmp_path, data, raw=False):
    p = tmp_path / "messages.json"
    p.write_text(data if raw else json.dumps(data), encoding="utf-8")
    return str(p)


def test_groups_by_category_in_order(tmp_path):
    path = write(tmp_path, {"messages": [
        {"message": "a", "type": "t1", "category": "Hydration"},
        {"message": "b", "type": "t2", "category": "Sleep"},
        {"message": "c", "type": "t3", "category": "Hydration"},
    ]})
    pool = load_messages(path)
    assert list(pool) == ["Hydration", "Sleep"]
    assert pool["Hydration"] == (ReminderMessage("a", "t1", "Hydration"), ReminderMessage("c", "t3", "Hydration"))


@pytest.mark.parametrize("data", [
    "{oops", "[]", '{"other": []}', '{"messages": {"message": "x"}}', "null",
])
def test_bad_catalogs_yield_empty_pool(tmp_path, data):
    assert load_messages(write(tmp_path, data, raw=True)) == {}


def test_missing_file(tmp_path):
    assert load_messages(str(tmp_path / "nope.json")) == {}


def test_skips_malformed_entries(tmp_path):
    path = write(tmp_path, {"messages": [
        {"message": "ok", "type": "t", "category": "CTF"},
        {"message": "no category", "type": "t"},
        {"message": 5, "type": "t", "category": "CTF"},
        "string",
    ]})
    assert load_messages(path) == {"CTF": (ReminderMessage("ok", "t", "CTF"),)}


def test_custom_key(tmp_path):
    path = write(tmp_path, {"reminders": [{"message": "m", "type": "t", "category": "Workout"}]})
    assert load_messages(path, key="reminders") == {"Workout": (ReminderMessage("m", "t", "Workout"),)}


def test_packaged_catalog_covers_default_categories():
    pool = load_messages(PACKAGED_MESSAGES)
    assert set(pool) >= {"Hydration", "Workout", "Russian", "CTF", "Sleep"}
