from typing import Any, Dict, Protocol


class MutationService(Protocol):
    """Protocol for record create/update calls."""

    async def create(self, collection: str, fields: Dict[str, Any]) -> Dict[str, Any]: ...
    async def update(self, id: str, fields: Dict[str, Any]) -> Dict[str, Any]: ...
