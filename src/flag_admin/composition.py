from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI

from . import db as db_mod
from .config import Settings
from .domain.flag import FLAG_FIELDS, FetchRequest
from .infrastructure.notifications import (
    CompositeNotificationSink,
    InMemoryNotificationSink,
    LoggingNotificationSink,
)
from .infrastructure.stores import build_store
from .logging_config import get_logger
from .services.flag_manager import FlagManager
from .services.flag_reader import FlagReader
from .services.flag_writer import FlagWriter
from .setup_db import create_all

logger = get_logger(__name__)


@dataclass
class WireResult:
    app: Any
    manager: FlagManager
    store: Any
    teardown: Any


def fetch_request_for(settings: Settings) -> FetchRequest:
    return FetchRequest(
        collection=settings.flag_collection,
        list_view=settings.flag_list_view,
        fields=list(FLAG_FIELDS),
        sort_by=settings.sort_fields(),
        page_size=settings.flag_page_size,
    )


def build_manager(store: Any, notifier: Any, settings: Settings) -> FlagManager:
    reader = FlagReader(store, fetch_request_for(settings))
    writer = FlagWriter(store, notifier, collection=settings.flag_collection)
    return FlagManager(reader, writer)


async def wire_app(app: FastAPI, settings: Settings | None = None) -> WireResult:
    """Build the store, notification sinks and flag manager and attach them to app.state.

    For the ``database`` backend this creates the engine/sessionmaker and the
    tables. The manager is initialized (subscribed + first fetch) before
    returning. Call the returned ``teardown`` on shutdown.

    This MUST NOT be called at module import time; tests rely on configuring
    the environment before any engines or clients are created.
    """
    if settings is None:
        settings = Settings()  # type: ignore[call-arg]

    session_factory = None
    if settings.flag_backend.lower() == "database":
        engine = db_mod.create_engine(settings)
        session_factory = db_mod.create_sessionmaker(engine)
        await create_all(engine=engine)

    store = build_store(settings, session_factory=session_factory)
    history = InMemoryNotificationSink(maxlen=settings.notification_history_size)
    notifier = CompositeNotificationSink([LoggingNotificationSink(), history])

    manager = build_manager(store, notifier, settings)
    await manager.initialize()

    app.state.flag_manager = manager
    app.state.notification_history = history
    app.state.flag_store = store
    logger.info(
        "initialized flag manager",
        backend=settings.flag_backend,
        collection=settings.flag_collection,
        rows=len(manager.rows),
    )

    async def _teardown():
        await manager.dispose()
        aclose = getattr(store, "aclose", None)
        if aclose is not None:
            try:
                await aclose()
            except Exception as e:
                logger.debug("store_close_failed", error=str(e))
        if session_factory is not None:
            await db_mod.dispose_engine()
        app.state.flag_manager = None

    return WireResult(app=app, manager=manager, store=store, teardown=_teardown)
