from typing import Any, Dict, List, Protocol


class ListingService(Protocol):
    """Protocol for reading one page of records from a named list view."""

    async def fetch(
        self,
        collection: str,
        list_view: str,
        fields: List[str],
        sort_by: List[str],
        page_size: int,
    ) -> Dict[str, Any]: ...
