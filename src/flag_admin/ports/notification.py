from typing import Protocol

from ..domain.notification import Severity


class NotificationSink(Protocol):
    """Fire-and-forget user notifications (toasts)."""

    def notify(self, title: str, message: str, severity: Severity) -> None: ...
