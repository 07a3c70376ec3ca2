"""Pydantic request/response schemas for the HTTP surface."""

from .flag import (
    DraftRowRequest,
    FlagRow,
    FlagTableResponse,
    GridColumnResponse,
    NotificationResponse,
    RowOutcomeResponse,
    SaveRequest,
    SaveResponse,
)

__all__ = [
    "DraftRowRequest",
    "FlagRow",
    "FlagTableResponse",
    "GridColumnResponse",
    "NotificationResponse",
    "RowOutcomeResponse",
    "SaveRequest",
    "SaveResponse",
]
