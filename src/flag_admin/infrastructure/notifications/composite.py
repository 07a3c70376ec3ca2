from typing import Iterable, List

from ...domain.notification import Severity
from ...logging_config import get_logger
from ...ports.notification import NotificationSink

logger = get_logger(__name__)


class CompositeNotificationSink:
    """Fans one notification out to several sinks.

    A failing sink is logged and skipped; notify stays fire-and-forget for the caller.
    """

    def __init__(self, sinks: Iterable[NotificationSink]):
        self.sinks: List[NotificationSink] = list(sinks)

    def notify(self, title: str, message: str, severity: Severity) -> None:
        for sink in self.sinks:
            try:
                sink.notify(title, message, severity)
            except Exception as e:
                logger.exception(
                    "notification_sink_failed", sink=type(sink).__name__, error=str(e)
                )
