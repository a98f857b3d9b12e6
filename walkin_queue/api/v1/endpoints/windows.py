"""Window endpoints (public)."""

from fastapi import APIRouter

from walkin_queue.api.v1.endpoints.queue import build_window_status_response
from walkin_queue.dependencies import DbSession
from walkin_queue.schemas.queue import WindowStatusListResponse
from walkin_queue.services.queue_service import queue_service

router = APIRouter()


@router.get("/active", response_model=WindowStatusListResponse)
def active_windows(db: DbSession) -> WindowStatusListResponse:
    """Active windows with assigned staff and the entry each is serving today."""
    return WindowStatusListResponse(
        windows=[build_window_status_response(s) for s in queue_service.public_windows(db)]
    )
