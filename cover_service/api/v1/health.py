"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Service health and public reachability."""
    state = request.app.state
    settings = state.settings
    public_url = state.availability.current()
    budget = settings.poll_budget()
    return {
        "status": "healthy",
        "public_url_ready": public_url is not None,
        "public_url": public_url,
        "remote_profile": settings.remote_profile,
        "poll_budget": {
            "interval_seconds": budget.interval_seconds,
            "max_attempts": budget.max_attempts,
            "max_wait_seconds": budget.max_wait_seconds,
        },
    }
