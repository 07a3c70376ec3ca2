from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_flag_manager, get_notification_history
from ..domain.flag import COLUMNS, ID_FIELD
from ..domain.save import SaveOutcome
from ..exceptions import SaveError
from ..infrastructure.notifications.memory_sink import InMemoryNotificationSink
from ..logging_config import get_logger
from ..schemas.flag import (
    DraftRowRequest,
    FlagTableResponse,
    GridColumnResponse,
    NotificationResponse,
    RowOutcomeResponse,
    SaveRequest,
    SaveResponse,
)
from ..services.flag_manager import FlagManager

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["flags"])


def _table(manager: FlagManager) -> FlagTableResponse:
    return FlagTableResponse(
        columns=[
            GridColumnResponse(
                label=c.label, fieldName=c.field_name, type=c.type, editable=c.editable
            )
            for c in COLUMNS
        ],
        rows=manager.table(),
        drafts=list(manager.drafts),
        state=manager.state.value,
    )


def save_response(outcome: SaveOutcome) -> SaveResponse:
    rows = []
    for r in outcome.rows:
        record_id = r.draft.get(ID_FIELD)
        if record_id is None and isinstance(r.record, dict):
            record_id = r.record.get("id")
        rows.append(
            RowOutcomeResponse(
                index=r.index,
                operation=r.operation.value,
                id=str(record_id) if record_id is not None else None,
                ok=r.ok,
                error=r.error,
            )
        )
    return SaveResponse(
        status="saved" if outcome.ok else "failed",
        message=outcome.message,
        created=outcome.created,
        updated=outcome.updated,
        rows=rows,
    )


@router.get("/flags", response_model=FlagTableResponse)
async def list_flags(manager: FlagManager = Depends(get_flag_manager)):
    """Return the grid columns, the loaded rows and the pending drafts."""
    return _table(manager)


@router.post("/flags/refresh", response_model=FlagTableResponse)
async def refresh_flags(manager: FlagManager = Depends(get_flag_manager)):
    """Re-run the listing fetch. A failed fetch keeps the current rows."""
    await manager.refresh()
    return _table(manager)


@router.post("/flags/drafts", response_model=FlagTableResponse)
async def stage_draft(draft: DraftRowRequest, manager: FlagManager = Depends(get_flag_manager)):
    logger.debug("staging_flag_draft", flag_id=draft.id)
    manager.stage_draft(draft.to_draft())
    return _table(manager)


@router.delete("/flags/drafts", response_model=FlagTableResponse)
async def clear_drafts(manager: FlagManager = Depends(get_flag_manager)):
    manager.clear_drafts()
    return _table(manager)


@router.post("/flags/save", response_model=SaveResponse)
async def save_flags(
    req: Optional[SaveRequest] = None,
    manager: FlagManager = Depends(get_flag_manager),
):
    """Save the staged drafts (or the drafts in the body) as one batch."""
    drafts = None
    if req is not None and req.drafts is not None:
        drafts = [d.to_draft() for d in req.drafts]
    outcome = await manager.save(drafts)
    if not outcome.ok:
        raise SaveError(outcome.message, outcomes=outcome.rows)
    return save_response(outcome)


@router.get("/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    limit: int = Query(20, ge=0),
    history: InMemoryNotificationSink = Depends(get_notification_history),
):
    return [
        NotificationResponse(
            title=n.title,
            message=n.message,
            severity=n.severity.value,
            created_at=n.created_at.isoformat(),
        )
        for n in history.recent(limit)
    ]
