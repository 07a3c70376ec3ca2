from .composite import CompositeNotificationSink
from .log_sink import LoggingNotificationSink
from .memory_sink import InMemoryNotificationSink

__all__ = ["CompositeNotificationSink", "LoggingNotificationSink", "InMemoryNotificationSink"]
