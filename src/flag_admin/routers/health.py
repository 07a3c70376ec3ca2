from fastapi import APIRouter, Request

router = APIRouter(tags=["system"])


@router.get("/health")
async def health(request: Request):
    manager = getattr(request.app.state, "flag_manager", None)
    return {
        "status": "ok",
        "flag_manager": "ready" if manager is not None and manager.initialized else "not_ready",
    }
