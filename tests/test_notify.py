import logging

from water_quest import notify
from water_quest.notify import Notifier


class FakePlyer:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def notify(self, **kw):
        self.calls.append(kw)
        if self.error:
            raise self.error


def test_notify_uses_plyer(monkeypatch):
    fake = FakePlyer()
    monkeypatch.setattr(notify, "notification", fake)
    Notifier(timeout=7).notify("Drink water", "Hydration Check | 2:00 PM")
    assert fake.calls == [{
        "title": "Water Quest",
        "message": "Drink water\nHydration Check | 2:00 PM",
        "app_name": "Water Quest",
        "timeout": 7,
    }]


def test_failure_goes_to_fallback(monkeypatch, caplog):
    monkeypatch.setattr(notify, "notification", FakePlyer(NotImplementedError("no backend")))
    shown = []
    n = Notifier(fallback=lambda body, attr: shown.append((body, attr)))
    with caplog.at_level(logging.WARNING):
        n.notify("Go to bed", "Sleep | 11:30 PM")
    assert shown == [("Go to bed", "Sleep | 11:30 PM")]
    assert "no backend" in caplog.text


def test_failure_without_fallback_is_swallowed(monkeypatch):
    monkeypatch.setattr(notify, "notification", FakePlyer(OSError("dbus")))
    Notifier().notify("x", "y")
