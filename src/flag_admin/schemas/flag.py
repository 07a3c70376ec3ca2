from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.flag import (
    DESCRIPTION_FIELD,
    ID_FIELD,
    IS_ACTIVE_FIELD,
    NAME_FIELD,
    PERCENTAGE_ROLLOUT_FIELD,
)


class FlagRow(BaseModel):
    """One row of the flag table, keyed by field API names."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias=ID_FIELD)
    name: Optional[str] = Field(default=None, alias=NAME_FIELD)
    description: Optional[str] = Field(default=None, alias=DESCRIPTION_FIELD)
    is_active: Optional[bool] = Field(default=None, alias=IS_ACTIVE_FIELD)
    percentage_rollout: Optional[float] = Field(default=None, alias=PERCENTAGE_ROLLOUT_FIELD)


class DraftRowRequest(FlagRow):
    """Request model for a draft edit. Only the fields that were set are sent on save."""

    def to_draft(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class SaveRequest(BaseModel):
    """Optional explicit batch; when omitted the staged drafts are saved."""

    drafts: Optional[List[DraftRowRequest]] = None


class GridColumnResponse(BaseModel):
    label: str
    fieldName: str
    type: str
    editable: bool


class FlagTableResponse(BaseModel):
    """Response model for the flag table."""

    columns: List[GridColumnResponse]
    rows: List[Dict[str, Any]]
    drafts: List[Dict[str, Any]]
    state: str


class RowOutcomeResponse(BaseModel):
    index: int
    operation: str
    id: Optional[str] = None
    ok: bool
    error: Optional[str] = None


class SaveResponse(BaseModel):
    """Response model for a batch save."""

    status: str
    message: str
    created: int = 0
    updated: int = 0
    rows: List[RowOutcomeResponse] = []


class NotificationResponse(BaseModel):
    title: str
    message: str
    severity: str
    created_at: str
