import asyncio
import uuid
from typing import Any, Dict, List, Optional

from ...domain.flag import FLAG_FIELDS, to_listing_item, unqualify
from ...exceptions import FetchError, MutationError


class InMemoryFlagStore:
    """Listing + mutation store kept in process memory.

    Records are stored as ``id -> {field: value}`` using the wire field names.
    Useful for local runs and tests; nothing is persisted.
    """

    def __init__(self, collection: str = "Feature_Flag__c", list_views: Optional[List[str]] = None):
        self.collection = collection
        self.list_views = list_views or ["All"]
        self.records: Dict[str, Dict[str, Any]] = {}
        self.lock = asyncio.Lock()

    def seed(self, *values: Dict[str, Any]) -> List[str]:
        ids = []
        for v in values:
            record_id = uuid.uuid4().hex
            self.records[record_id] = {f: v.get(f) for f in FLAG_FIELDS}
            ids.append(record_id)
        return ids

    def _check_collection(self, collection: str) -> None:
        if collection != self.collection:
            raise MutationError(f"unknown collection: {collection}")

    def _check_fields(self, fields: Dict[str, Any]) -> None:
        unknown = sorted(set(fields) - set(FLAG_FIELDS))
        if unknown:
            raise MutationError(f"No such column '{unknown[0]}' on {self.collection}")

    async def fetch(
        self,
        collection: str,
        list_view: str,
        fields: List[str],
        sort_by: List[str],
        page_size: int,
    ) -> Dict[str, Any]:
        if collection != self.collection:
            raise FetchError(f"unknown collection: {collection}")
        if list_view not in self.list_views:
            raise FetchError(f"unknown list view: {list_view}")
        wanted = [unqualify(f) for f in fields]
        sort_keys = [unqualify(s) for s in sort_by]
        async with self.lock:
            items = list(self.records.items())

        def _key(item):
            _, values = item
            # None sorts last
            return tuple(
                (values.get(k) is None, 0 if values.get(k) is None else values.get(k))
                for k in sort_keys
            )

        if sort_keys:
            items.sort(key=_key)
        page = items[: max(page_size, 0)]
        return {
            "records": [
                to_listing_item(record_id, {f: values.get(f) for f in wanted if f in values})
                for record_id, values in page
            ],
            "count": len(page),
        }

    async def create(self, collection: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._check_collection(collection)
        self._check_fields(fields)
        if not fields.get("Name"):
            raise MutationError("Required fields are missing: [Name]")
        record_id = uuid.uuid4().hex
        async with self.lock:
            self.records[record_id] = {f: fields.get(f) for f in FLAG_FIELDS}
            values = dict(self.records[record_id])
        return to_listing_item(record_id, values)

    async def update(self, id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._check_fields(fields)
        async with self.lock:
            current = self.records.get(id)
            if current is None:
                raise MutationError(f"The requested resource does not exist: {id}")
            current.update(fields)
            values = dict(current)
        return to_listing_item(id, values)
