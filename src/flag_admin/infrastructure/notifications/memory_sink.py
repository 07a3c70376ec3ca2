from collections import deque
from typing import Deque, List

from ...domain.notification import Notification, Severity


class InMemoryNotificationSink:
    """Keeps the most recent notifications so a UI shell can poll them."""

    def __init__(self, maxlen: int = 50):
        self.history: Deque[Notification] = deque(maxlen=maxlen)

    def notify(self, title: str, message: str, severity: Severity) -> None:
        self.history.append(Notification(title=title, message=message, severity=Severity(severity)))

    def recent(self, limit: int | None = None) -> List[Notification]:
        items = list(self.history)
        items.reverse()
        return items if limit is None else items[: max(limit, 0)]

    def clear(self) -> None:
        self.history.clear()
