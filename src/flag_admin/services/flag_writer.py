import asyncio
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..domain.flag import ID_FIELD
from ..domain.notification import Severity
from ..domain.save import MutationKind, RowOutcome, SaveOutcome
from ..exceptions import error_message
from ..logging_config import get_logger
from ..metrics import FLAG_MUTATIONS, FLAG_SAVE_BATCHES, FLAG_SAVE_DURATION
from ..ports.mutation import MutationService
from ..ports.notification import NotificationSink

logger = get_logger(__name__)

SUCCESS_TITLE = "Success"
SUCCESS_MESSAGE = "Feature Flags updated"
ERROR_TITLE = "Error updating or creating records"


def partition(
    drafts: Iterable[Mapping[str, Any]],
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split drafts into (updates, creates) by the truthiness of ``Id``."""
    updates: List[Dict[str, Any]] = []
    creates: List[Dict[str, Any]] = []
    for d in drafts:
        fields = dict(d)
        if fields.get(ID_FIELD):
            updates.append(fields)
        else:
            creates.append(fields)
    return updates, creates


class FlagWriter:
    def __init__(
        self,
        mutations: MutationService,
        notifier: NotificationSink,
        collection: str = "Feature_Flag__c",
    ):
        self.mutations = mutations
        self.notifier = notifier
        self.collection = collection

    async def _mutate(self, operation: MutationKind, draft: Dict[str, Any]) -> Any:
        payload = {k: v for k, v in draft.items() if k != ID_FIELD}
        if operation is MutationKind.UPDATE:
            return await self.mutations.update(str(draft[ID_FIELD]), payload)
        return await self.mutations.create(self.collection, payload)

    async def _settle(
        self,
        index: int,
        operation: MutationKind,
        draft: Dict[str, Any],
        settled: List[RowOutcome],
    ) -> None:
        outcome = await self._attempt(index, operation, draft)
        # appended as each call settles, so list order is completion order
        settled.append(outcome)

    async def _attempt(self, index: int, operation: MutationKind, draft: Dict[str, Any]) -> RowOutcome:
        try:
            record = await self._mutate(operation, draft)
        except Exception as e:
            message = error_message(e)
            logger.warning(
                "feature_flag_mutation_failed",
                operation=operation.value,
                flag_id=draft.get(ID_FIELD),
                error=message,
            )
            if FLAG_MUTATIONS is not None:
                FLAG_MUTATIONS.labels(operation=operation.value, result="failure").inc()
            return RowOutcome(index=index, operation=operation, draft=draft, error=message)
        if FLAG_MUTATIONS is not None:
            FLAG_MUTATIONS.labels(operation=operation.value, result="success").inc()
        return RowOutcome(index=index, operation=operation, draft=draft, record=record)

    async def save(self, drafts: Iterable[Mapping[str, Any]]) -> SaveOutcome:
        """Issue one create/update per draft concurrently and wait for all of them.

        Every call settles before the outcome is reported. A single
        notification is emitted: success, or an error carrying the message of
        the first call to fail. The caller gets the per-row results in
        ``SaveOutcome.rows``; nothing is raised.
        """
        started = time.perf_counter()
        drafts = [dict(d) for d in drafts]
        updates, creates = partition(drafts)
        logger.info(
            "feature_flags_saving",
            collection=self.collection,
            updates=len(updates),
            creates=len(creates),
        )

        # tasks are scheduled in draft order; rejections in the same tick settle in that order
        settled: List[RowOutcome] = []
        tasks = []
        for index, draft in enumerate(drafts):
            operation = MutationKind.UPDATE if draft.get(ID_FIELD) else MutationKind.CREATE
            tasks.append(asyncio.ensure_future(self._settle(index, operation, draft, settled)))
        await asyncio.gather(*tasks)

        rows = sorted(settled, key=lambda r: r.index)
        first_failure: Optional[RowOutcome] = next((r for r in settled if not r.ok), None)

        if FLAG_SAVE_DURATION is not None:
            FLAG_SAVE_DURATION.observe(time.perf_counter() - started)

        if first_failure is None:
            if FLAG_SAVE_BATCHES is not None:
                FLAG_SAVE_BATCHES.labels(result="success").inc()
            logger.info("feature_flags_saved", count=len(rows))
            self.notifier.notify(SUCCESS_TITLE, SUCCESS_MESSAGE, Severity.SUCCESS)
            return SaveOutcome(ok=True, message=SUCCESS_MESSAGE, rows=rows)

        message = first_failure.error or ""
        if FLAG_SAVE_BATCHES is not None:
            FLAG_SAVE_BATCHES.labels(result="failure").inc()
        logger.error(
            "feature_flags_save_failed",
            error=message,
            failed=sum(1 for r in rows if not r.ok),
            count=len(rows),
        )
        self.notifier.notify(ERROR_TITLE, message, Severity.ERROR)
        return SaveOutcome(ok=False, message=message, rows=rows)
