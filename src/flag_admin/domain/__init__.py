"""Domain types for flag administration: records, save outcomes, notifications."""

from .flag import COLUMNS, FLAG_FIELDS, FetchRequest, FlagRecord, GridColumn, project_listing
from .notification import Notification, Severity
from .save import MutationKind, RowOutcome, SaveOutcome, SaveState

__all__ = [
    "COLUMNS",
    "FLAG_FIELDS",
    "FetchRequest",
    "FlagRecord",
    "GridColumn",
    "project_listing",
    "Notification",
    "Severity",
    "MutationKind",
    "RowOutcome",
    "SaveOutcome",
    "SaveState",
]
