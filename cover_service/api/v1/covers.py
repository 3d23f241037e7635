"""Cover generation endpoints.

  POST /api/generate-cover  - upload an audio file, wait for the cover
  POST /api/suno-callback   - webhook from the remote API (logged only)
"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Request, UploadFile

from cover_service.generation.orchestrator import CoverOrchestrator
from cover_service.reachability.availability import Availability

logger = logging.getLogger(__name__)

router = APIRouter()


def get_orchestrator(request: Request) -> CoverOrchestrator:
    return request.app.state.orchestrator


def get_availability(request: Request) -> Availability:
    return request.app.state.availability


# ---------------------------------------------------------------------------
# POST /api/generate-cover
# ---------------------------------------------------------------------------

@router.post("/generate-cover")
async def generate_cover(
    request: Request,
    audio: Optional[UploadFile] = File(None),
    orchestrator: CoverOrchestrator = Depends(get_orchestrator),
    availability: Availability = Depends(get_availability),
):
    """Generate a piano cover of the uploaded audio.

    Blocks until the remote task finishes (minutes). A caller disconnect does
    not stop polling.

    Returns:
        {success, message, coverUrl}
    """
    result = await orchestrator.handle_upload(
        audio,
        availability,
        request_host=request.headers.get("host"),
    )
    return {
        "success": result.success,
        "message": "Cover generated successfully",
        "coverUrl": result.cover_url,
    }


# ---------------------------------------------------------------------------
# POST /api/suno-callback
# ---------------------------------------------------------------------------

@router.post("/suno-callback")
async def suno_callback(payload: Any = Body(None)):
    """Acknowledge a task notification. Polling remains authoritative."""
    logger.info("=== Suno Callback Received ===\n%s", json.dumps(payload, indent=2))
    return {"success": True}
