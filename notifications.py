from __future__ import annotations
import logging
from typing import Callable, Optional

from schemas import Notification

logger = logging.getLogger(__name__)

SEVERITIES = ("success", "info", "warning", "error")


class Notifier:
    """
    Message channel shared by one workflow and the screen rendering it.

    Publishers emit (message, severity); a single subscriber is told about
    each one, and `latest` always holds the most recent notification.
    """

    def __init__(self, subscriber: Optional[Callable[[Notification], None]] = None):
        self._subscriber = subscriber
        self.latest: Optional[Notification] = None

    def subscribe(self, subscriber: Callable[[Notification], None]) -> None:
        self._subscriber = subscriber

    def publish(self, message: str, severity: str = "info") -> Notification:
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {severity}")
        note = Notification(message=message, severity=severity)
        self.latest = note
        log = logger.error if severity == "error" else logger.info
        log(f"[{severity}] {message}")
        if self._subscriber is not None:
            self._subscriber(note)
        return note

    def clear(self) -> None:
        self.latest = None
