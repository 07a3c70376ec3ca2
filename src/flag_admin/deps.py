"""FastAPI dependencies resolving the runtime-wired components from app state."""

from fastapi import HTTPException, Request

from .infrastructure.notifications.memory_sink import InMemoryNotificationSink
from .services.flag_manager import FlagManager


def get_flag_manager(request: Request) -> FlagManager:
    manager = getattr(request.app.state, "flag_manager", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="flag manager not initialized")
    return manager


def get_notification_history(request: Request) -> InMemoryNotificationSink:
    history = getattr(request.app.state, "notification_history", None)
    if history is None:
        raise HTTPException(status_code=503, detail="notifications not initialized")
    return history
