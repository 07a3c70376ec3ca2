from ...domain.notification import Severity
from ...logging_config import get_logger

logger = get_logger(__name__)


class LoggingNotificationSink:
    """Writes every notification to the structured log."""

    def notify(self, title: str, message: str, severity: Severity) -> None:
        log = logger.error if severity is Severity.ERROR else logger.info
        log("flag_notification", title=title, message=message, severity=Severity(severity).value)
