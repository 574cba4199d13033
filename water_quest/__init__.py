"""Water Quest: tray reminders for daily habits, plus a workout log."""

__version__ = "1.0.0"
