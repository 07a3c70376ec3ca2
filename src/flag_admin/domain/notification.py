from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Notification:
    title: str
    message: str
    severity: Severity
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
