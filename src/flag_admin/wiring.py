from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .config import Settings
from .logging_config import get_logger

logger = get_logger(__name__)


def _create_minimal_app() -> FastAPI:
    """Create the FastAPI app object without running side-effectful wiring.
    Tests can import and call this to create fresh apps.
    """
    app = FastAPI(title="Feature Flag Admin")
    # populated by composition.wire_app at startup (or directly by tests)
    app.state.flag_manager = None
    app.state.notification_history = None
    return app


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a routed FastAPI application.

    The store, sinks and flag manager are NOT built here; that happens in the
    composition root at startup so tests can install their own.
    """
    if settings is None:
        settings = Settings()

    app = _create_minimal_app()
    app.state.settings = settings

    from .domain.save import SaveOutcome
    from .exceptions import SaveError, SaveInProgressError
    from .metrics import metrics_response
    from .middleware.metrics_middleware import MetricsMiddleware
    from .routers import flags, health
    from .routers.flags import save_response

    app.include_router(health.router)
    app.include_router(flags.router)

    app.add_middleware(MetricsMiddleware)

    @app.get("/metrics")
    async def _metrics():
        data, content_type = metrics_response()
        return Response(content=data, media_type=content_type)

    @app.exception_handler(SaveError)
    async def _save_error_handler(request: Request, exc: SaveError):
        body = save_response(SaveOutcome(ok=False, message=exc.message, rows=exc.outcomes))
        return JSONResponse(status_code=502, content=body.model_dump())

    @app.exception_handler(SaveInProgressError)
    async def _save_in_progress_handler(request: Request, exc: SaveInProgressError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    return app


__all__ = ["create_app", "_create_minimal_app"]
