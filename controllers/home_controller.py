from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request):
    store = request.app.state.rate_limit_store
    return {
        "status": "ok",
        "environment": request.app.state.settings.app_env,
        "rate_limit_entries": len(store),
    }
