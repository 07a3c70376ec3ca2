"""The flag table component: owns the loaded rows and the pending drafts.

Lifecycle is explicit. ``initialize()`` subscribes to the reader and loads the
first page, ``dispose()`` releases the subscription. The manager can also be
used as ``async with FlagManager(...) as manager:``.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..domain.flag import ID_FIELD, FlagRecord
from ..domain.save import SaveOutcome, SaveState
from ..exceptions import SaveInProgressError
from ..logging_config import get_logger
from .flag_reader import FlagReader, Subscription
from .flag_writer import FlagWriter

logger = get_logger(__name__)


class FlagManager:
    def __init__(self, reader: FlagReader, writer: FlagWriter):
        self.reader = reader
        self.writer = writer
        self.rows: List[FlagRecord] = []
        self.drafts: List[Dict[str, Any]] = []
        self.state: SaveState = SaveState.IDLE
        self.last_outcome: Optional[SaveOutcome] = None
        self._subscription: Optional[Subscription] = None

    @property
    def initialized(self) -> bool:
        return self._subscription is not None

    async def initialize(self) -> None:
        if self._subscription is not None:
            return
        self._subscription = self.reader.subscribe(self._on_rows)
        logger.info("flag_manager_initialized", collection=self.reader.request.collection)
        await self.reader.refresh()

    async def dispose(self) -> None:
        if self._subscription is None:
            return
        self._subscription.close()
        self._subscription = None
        logger.info("flag_manager_disposed")

    async def __aenter__(self) -> "FlagManager":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose()

    def _on_rows(self, rows: List[FlagRecord]) -> None:
        # replaced wholesale, never patched
        self.rows = rows

    async def refresh(self) -> List[FlagRecord]:
        await self.reader.refresh()
        return self.rows

    def table(self) -> List[Dict[str, Any]]:
        return [r.to_row() for r in self.rows]

    def stage_draft(self, draft: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Record an edit. Edits to the same persisted row are merged."""
        values = dict(draft)
        record_id = values.get(ID_FIELD)
        if record_id:
            for existing in self.drafts:
                if existing.get(ID_FIELD) == record_id:
                    existing.update(values)
                    return self.drafts
        self.drafts.append(values)
        return self.drafts

    def clear_drafts(self) -> None:
        self.drafts = []

    async def save(self, drafts: Optional[Iterable[Mapping[str, Any]]] = None) -> SaveOutcome:
        """Save ``drafts`` (or the staged drafts) as one batch.

        On success the staged drafts are cleared and the table is refreshed.
        On failure the drafts are kept so the same batch can be retried.
        """
        if self.state is SaveState.SAVING:
            raise SaveInProgressError("a save is already in progress")
        batch = [dict(d) for d in (self.drafts if drafts is None else drafts)]

        self.state = SaveState.SAVING
        try:
            outcome = await self.writer.save(batch)
        except BaseException:
            self.state = SaveState.IDLE
            raise
        self.last_outcome = outcome

        if not outcome.ok:
            self.state = SaveState.FAILED
            logger.info("flag_save_failed_drafts_kept", drafts=len(self.drafts))
            self.state = SaveState.IDLE
            return outcome

        self.state = SaveState.SAVED
        self.clear_drafts()
        try:
            await self.refresh()
        finally:
            self.state = SaveState.IDLE
        return outcome
