from typing import Any, Dict, List, Optional

import httpx

from ...exceptions import FetchError, MutationError, body_message
from ...logging_config import get_logger

logger = get_logger(__name__)


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"message": response.text or response.reason_phrase}


class HttpFlagStore:
    """Listing + mutation store talking to a remote records API.

    Endpoints (relative to ``base_url``)::

        GET   /lists/{collection}/{list_view}?fields=..&sortBy=..&pageSize=..
        POST  /records               {"apiName": collection, "fields": {...}}
        PATCH /records/{id}          {"fields": {...}}

    Error responses carry ``{"message": ...}`` or ``[{"message": ...}]``; the
    decoded payload is kept on the raised exception as ``body``.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.client.headers.update(headers)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def fetch(
        self,
        collection: str,
        list_view: str,
        fields: List[str],
        sort_by: List[str],
        page_size: int,
    ) -> Dict[str, Any]:
        params = {
            "fields": ",".join(fields),
            "sortBy": ",".join(sort_by),
            "pageSize": str(page_size),
        }
        try:
            response = await self.client.get(f"/lists/{collection}/{list_view}", params=params)
        except httpx.HTTPError as exc:
            raise FetchError(f"listing request failed: {exc}") from exc
        if response.is_error:
            body = _decode_body(response)
            raise FetchError(body_message(body) or f"HTTP {response.status_code}")
        return response.json()

    async def _send(self, method: str, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.client.request(method, url, json=payload)
        except httpx.HTTPError as exc:
            logger.debug("records_api_request_failed", method=method, url=url, error=str(exc))
            raise MutationError(str(exc) or exc.__class__.__name__) from exc
        if response.is_error:
            body = _decode_body(response)
            raise MutationError(body_message(body) or f"HTTP {response.status_code}", body=body)
        return response.json()

    async def create(self, collection: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self._send("POST", "/records", {"apiName": collection, "fields": fields})

    async def update(self, id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self._send("PATCH", f"/records/{id}", {"fields": fields})
