import datetime, json, logging

from water_quest import config as cfgmod

T = datetime.time


def test_defaults_when_missing(tmp_path):
    cfg = cfgmod.load_config(str(tmp_path / "none.json"))
    assert cfg["poll_interval"] == 30
    assert cfg["exercises"][0] == "Push-ups"
    assert cfg["messages_file"] is None
    assert cfgmod.messages_path(cfg) == cfgmod.PACKAGED_MESSAGES


def test_user_values_and_validation(tmp_path):
    p = tmp_path / "c.json"
    p.write_text(json.dumps({"poll_interval": 0, "notification_timeout": "x",
                             "exercises": [], "messages_file": "/tmp/m.json"}), encoding="utf-8")
    cfg = cfgmod.load_config(str(p))
    assert cfg["poll_interval"] == 30
    assert cfg["notification_timeout"] == 10
    assert cfg["exercises"] == cfgmod.DEFAULT_CONFIG["exercises"]
    assert cfgmod.messages_path(cfg) == "/tmp/m.json"


def test_corrupt_config_falls_back(tmp_path, caplog):
    p = tmp_path / "c.json"
    p.write_text("{{{", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        cfg = cfgmod.load_config(str(p))
    assert cfg["schedule"] == cfgmod.DEFAULT_CONFIG["schedule"]
    assert "Config load error" in caplog.text


def test_test_mode_shortens_poll(tmp_path):
    assert cfgmod.load_config(str(tmp_path / "x.json"), test_mode=True)["poll_interval"] == cfgmod.TEST_POLL_INTERVAL


def test_save_and_reload(tmp_path):
    p = str(tmp_path / "c.json")
    cfg = cfgmod.load_config(p)
    cfg["exercises"] = ["Burpees"]
    cfgmod.save_config(cfg, p)
    assert cfgmod.load_config(p)["exercises"] == ["Burpees"]


def test_default_schedule():
    table = cfgmod.build_schedule(cfgmod.load_config("/nonexistent/cfg.json"))
    assert list(table) == ["Hydration", "Workout", "Russian", "CTF", "Sleep"]
    assert table["Sleep"] == (T(23, 30), T(23, 40), T(23, 50), T(0, 0))
    assert len(table["Hydration"]) == 6


def test_schedule_drops_bad_entries(caplog):
    cfg = {"schedule": {"Water": ["08:00", "nope", "08:00", "25:00"], "Empty": ["x"], "Odd": "09:00"}}
    with caplog.at_level(logging.WARNING):
        table = cfgmod.build_schedule(cfg)
    assert table == {"Water": (T(8, 0),)}
    assert "dropping" in caplog.text


def test_unusable_schedule_uses_default():
    table = cfgmod.build_schedule({"schedule": {"Bad": []}})
    assert "Hydration" in table
    assert cfgmod.build_schedule({"schedule": "nope"}) == table


def test_ensure_config_writes_defaults_once(tmp_path):
    p = tmp_path / "c.json"
    cfgmod.ensure_config(str(p))
    assert json.loads(p.read_text(encoding="utf-8")) == cfgmod.DEFAULT_CONFIG

    p.write_text(json.dumps({"poll_interval": 7}), encoding="utf-8")
    cfgmod.ensure_config(str(p))
    assert json.loads(p.read_text(encoding="utf-8")) == {"poll_interval": 7}
