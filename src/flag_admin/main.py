# configure logging early so library messages emitted during import are rendered consistently
from .logging_config import get_logger

logger = get_logger(__name__)

# IMPORTANT: Import composition but do NOT call anything that creates engines or
# clients at module import time. composition.wire_app() runs in on_startup().
from . import composition

# Create app using wiring.create_app() to avoid duplicating router/middleware registration
from .wiring import create_app

app = create_app()


@app.on_event("startup")
async def on_startup():
    app.state.wire_result = await composition.wire_app(app, app.state.settings)


@app.on_event("shutdown")
async def on_shutdown():
    result = getattr(app.state, "wire_result", None)
    if result is not None:
        await result.teardown()
    logger.info("shutdown complete")


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run("flag_admin.main:app", host=settings.server_host, port=settings.server_port)
