import datetime, json, logging, threading

import pytest

from water_quest.workouts import (HistorySummary, WorkoutRecord, WorkoutStore, build_record, default_log_date,
                                  format_history, summarize)

D1 = datetime.date(2024, 1, 1)
D2 = datetime.date(2024, 1, 2)


@pytest.fixture
def store(tmp_path):
    return WorkoutStore(str(tmp_path / "workouts.json"))


def test_load_missing_file_is_empty(store):
    assert store.load() == []


@pytest.mark.parametrize("content", [
    "", "{not json", '{"Date": "2024-01-01"}', "42", "\xff\xfe garbage",
])
def test_load_malformed_file_is_empty(store, content, caplog):
    with open(store.path, "w", encoding="utf-8") as f:
        f.write(content)
    with caplog.at_level(logging.WARNING):
        assert store.load() == []


def test_load_skips_bad_entries(store, caplog):
    data = [
        {"Date": "2024-01-01T00:00:00", "Exercises": {"Squats": 5}},
        {"Date": "yesterday", "Exercises": {}},
        {"Date": "2024-01-03T00:00:00", "Exercises": {"Squats": -3}},
        "nope",
    ]
    with open(store.path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    with caplog.at_level(logging.WARNING):
        records = store.load()
    assert records == [WorkoutRecord(D1, {"Squats": 5})]
    assert "Skipping workout entry" in caplog.text


def test_save_writes_indented_json(store):
    store.save(WorkoutRecord(D1, {"Push-ups": 10, "Squats": 5}))
    with open(store.path, encoding="utf-8") as f:
        text = f.read()
    assert "\n  " in text
    assert json.loads(text) == [{"Date": "2024-01-01T00:00:00", "Exercises": {"Push-ups": 10, "Squats": 5}}]


def test_save_same_date_replaces_not_merges(store):
    store.save(WorkoutRecord(D1, {"Push-ups": 10, "Squats": 5}))
    store.save(WorkoutRecord(D2, {"Abs": 3}))
    store.save(WorkoutRecord(D1, {"Abs": 20}))
    records = store.load()
    assert len(records) == 2
    day1 = [r for r in records if r.date == D1]
    assert day1 == [WorkoutRecord(D1, {"Abs": 20})]


def test_save_over_corrupt_file_starts_fresh(store):
    with open(store.path, "w", encoding="utf-8") as f:
        f.write("[{broken")
    store.save(WorkoutRecord(D2, {"Squats": 1}))
    assert store.load() == [WorkoutRecord(D2, {"Squats": 1})]


def test_save_leaves_no_temp_files(store, tmp_path):
    store.save(WorkoutRecord(D1, {"Squats": 1}))
    assert [p.name for p in tmp_path.iterdir()] == ["workouts.json"]


def test_reads_plain_dates(store):
    with open(store.path, "w", encoding="utf-8") as f:
        json.dump([{"Date": "2024-01-02", "Exercises": {"Abs": 4}}], f)
    assert store.load() == [WorkoutRecord(D2, {"Abs": 4})]


def test_summarize():
    records = [WorkoutRecord(D1, {"Pushups": 10, "Squats": 5}), WorkoutRecord(D2, {"Pushups": 20})]
    assert summarize(records) == HistorySummary(days=2, total_reps=35, mean_reps=17.5)


def test_summarize_empty_raises():
    with pytest.raises(ValueError):
        summarize([])


def test_format_history():
    records = [WorkoutRecord(D1, {"Squats": 5, "Pushups": 10}), WorkoutRecord(D2, {"Pushups": 20})]
    assert format_history(records) == (
        "Date: 2024-01-02\n"
        "Pushups: 20\n"
        "Total: 20\n"
        "\n"
        "Date: 2024-01-01\n"
        "Pushups: 10\n"
        "Squats: 5\n"
        "Total: 15\n"
        "\n"
        "Days recorded: 2\n"
        "Total reps: 35\n"
        "Average per day: 17.5\n"
    )


@pytest.mark.parametrize("now, expected", [
    (datetime.datetime(2024, 1, 2, 8, 30), D1),
    (datetime.datetime(2024, 1, 2, 11, 59), D1),
    (datetime.datetime(2024, 1, 2, 12, 0), D2),
    (datetime.datetime(2024, 1, 2, 22, 15), D2),
])
def test_default_log_date(now, expected):
    assert default_log_date(now) == expected


def test_concurrent_saves_on_same_path_keep_every_day(tmp_path):
    path = str(tmp_path / "workouts.json")
    start = threading.Barrier(2)

    def writer(month):
        store = WorkoutStore(path)
        start.wait()
        for day in range(1, 21):
            store.save(WorkoutRecord(datetime.date(2024, month, day), {"Squats": day}))

    threads = [threading.Thread(target=writer, args=(m,)) for m in (1, 2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(10)
    records = WorkoutStore(path).load()
    assert len(records) == 40
    assert {r.date.month for r in records} == {1, 2}


def test_build_record_from_form_values():
    assert build_record(D2, {"Push-ups": "12", "Squats": " 0 ", "Abs": 1000}) == \
        WorkoutRecord(D2, {"Push-ups": 12, "Squats": 0, "Abs": 1000})


@pytest.mark.parametrize("raw, message", [
    ("ten", "Squats: enter a whole number"),
    ("", "Squats: enter a whole number"),
    ("2.5", "Squats: enter a whole number"),
    ("-1", "Squats: 0 to 1000"),
    ("1001", "Squats: 0 to 1000"),
])
def test_build_record_rejects_bad_counts(raw, message):
    with pytest.raises(ValueError, match=message):
        build_record(D1, {"Squats": raw})
