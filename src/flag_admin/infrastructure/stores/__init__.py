"""Flag store adapters: each implements both the listing and the mutation port.

Call `build_store(settings, session_factory=None)` to obtain the store selected by
``settings.flag_backend``.
"""

from typing import Any

from ...config import Settings


def build_store(settings: Settings, session_factory: Any = None) -> Any:
    backend = (settings.flag_backend or "memory").lower()
    # import concrete implementations lazily so unused backends never load
    if backend == "memory":
        from .memory import InMemoryFlagStore

        return InMemoryFlagStore(collection=settings.flag_collection, list_views=[settings.flag_list_view])
    if backend == "database":
        from .sqlalchemy_store import SqlAlchemyFlagStore

        if session_factory is None:
            raise RuntimeError("database backend needs a session factory")
        return SqlAlchemyFlagStore(session_factory, collection=settings.flag_collection)
    if backend == "http":
        from .http_store import HttpFlagStore

        if not settings.records_api_url:
            raise RuntimeError("http backend needs RECORDS_API_URL")
        return HttpFlagStore(
            settings.records_api_url,
            token=settings.records_api_token or None,
            timeout=settings.records_api_timeout_seconds,
        )
    raise ValueError(f"unknown flag backend: {settings.flag_backend}")


__all__ = ["build_store"]
