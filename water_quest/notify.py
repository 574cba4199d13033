"""Desktop notifications via plyer, with an optional fallback."""
from __future__ import annotations
import logging
from typing import Callable, Optional

from plyer import notification

log = logging.getLogger(__name__)

APP_NAME = "Water Quest"


class Notifier:
    """Fire-and-forget toast presenter.

    ``fallback(body, attribution)`` is called when the native backend fails,
    e.g. on a Linux box without a notification daemon.
    """

    def __init__(self, app_name: str = APP_NAME, timeout: int = 10,
                 fallback: Optional[Callable[[str, str], None]] = None):
        self.app_name = app_name
        self.timeout = timeout
        self.fallback = fallback

    def notify(self, body: str, attribution: str) -> None:
        try:
            notification.notify(
                title=self.app_name,
                message=f"{body}\n{attribution}",
                app_name=self.app_name,
                timeout=self.timeout,
            )
        except Exception as e:
            log.warning("Native notification failed: %s", e)
            if self.fallback is not None:
                self.fallback(body, attribution)
