from typing import Callable, List, Optional

from ..domain.flag import FetchRequest, FlagRecord, project_listing
from ..exceptions import FetchError
from ..logging_config import get_logger
from ..metrics import FLAG_FETCHES
from ..ports.listing import ListingService

logger = get_logger(__name__)

RowsCallback = Callable[[List[FlagRecord]], None]


class Subscription:
    """Handle returned by :meth:`FlagReader.subscribe`; ``close()`` detaches it."""

    def __init__(self, reader: "FlagReader", callback: RowsCallback):
        self._reader = reader
        self.callback = callback
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._reader._unsubscribe(self)


class FlagReader:
    def __init__(self, listing: ListingService, request: Optional[FetchRequest] = None):
        self.listing = listing
        self.request = request or FetchRequest()
        self._subscriptions: List[Subscription] = []

    async def fetch(self, request: Optional[FetchRequest] = None) -> List[FlagRecord]:
        req = request or self.request
        try:
            payload = await self.listing.fetch(
                req.collection,
                req.list_view,
                req.qualified_fields(),
                req.qualified_sort_by(),
                req.page_size,
            )
            rows = project_listing(payload)
        except FetchError:
            if FLAG_FETCHES is not None:
                FLAG_FETCHES.labels(result="failure").inc()
            raise
        except Exception as e:
            if FLAG_FETCHES is not None:
                FLAG_FETCHES.labels(result="failure").inc()
            raise FetchError(str(e) or e.__class__.__name__) from e
        if FLAG_FETCHES is not None:
            FLAG_FETCHES.labels(result="success").inc()
        logger.debug("feature_flags_fetched", collection=req.collection, count=len(rows))
        return rows

    def subscribe(self, callback: RowsCallback) -> Subscription:
        sub = Subscription(self, callback)
        self._subscriptions.append(sub)
        return sub

    def _unsubscribe(self, sub: Subscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    async def refresh(self) -> Optional[List[FlagRecord]]:
        """Fetch and hand the rows to every subscriber.

        A failed fetch is logged and leaves subscribers untouched; ``None`` is
        returned in that case.
        """
        try:
            rows = await self.fetch()
        except FetchError as e:
            logger.error(
                "feature_flags_fetch_failed",
                collection=self.request.collection,
                list_view=self.request.list_view,
                error=str(e),
            )
            return None
        for sub in list(self._subscriptions):
            # each subscriber owns its copy of the table
            sub.callback(list(rows))
        return rows
