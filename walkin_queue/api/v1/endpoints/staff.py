"""Staff window endpoints."""

from fastapi import APIRouter

from walkin_queue.dependencies import DbSession, WindowStaff
from walkin_queue.schemas.common import SuccessResponse
from walkin_queue.schemas.queue import QueueEntryEnvelope, WindowResponse, build_queue_entry_response
from walkin_queue.schemas.staff import (
    AssignmentResponse,
    AssignWindowRequest,
    AssignWindowResponse,
    CompleteResponse,
    DashboardResponse,
    DashboardStats,
    ServingLogResponse,
    SkipResponse,
)
from walkin_queue.services.serving_service import serving_service
from walkin_queue.services.staff_service import staff_service
from walkin_queue.services.window_service import window_service

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(db: DbSession, current_staff: WindowStaff) -> DashboardResponse:
    """Current window, ordered candidate queue and today's counts."""
    staff_service.touch_last_seen(db, current_staff.id)
    view = serving_service.dashboard(db, current_staff.id)
    return DashboardResponse(
        window=WindowResponse.model_validate(view.window) if view.window else None,
        queue=[build_queue_entry_response(e) for e in view.queue],
        stats=DashboardStats(
            total_served=view.total_served, total_skipped=view.total_skipped
        ),
    )


@router.post("/assign-window", response_model=AssignWindowResponse)
def assign_window(
    assign_in: AssignWindowRequest, db: DbSession, current_staff: WindowStaff
) -> AssignWindowResponse:
    """Attach to a window, or release the current one."""
    assignment = window_service.assign_window(db, current_staff.id, assign_in.window_id)
    return AssignWindowResponse(
        assignment=AssignmentResponse.model_validate(assignment) if assignment else None
    )


@router.post("/serve/{queue_entry_id}", response_model=QueueEntryEnvelope)
def start_serving(
    queue_entry_id: int, db: DbSession, current_staff: WindowStaff
) -> QueueEntryEnvelope:
    """Claim a waiting entry for the staff member's window (409 if taken)."""
    entry = serving_service.claim_next(db, current_staff.id, queue_entry_id)
    return QueueEntryEnvelope(queue_entry=build_queue_entry_response(entry))


@router.post("/complete/{queue_entry_id}", response_model=CompleteResponse)
def complete_serving(
    queue_entry_id: int, db: DbSession, current_staff: WindowStaff
) -> CompleteResponse:
    """Mark an entry served and log the service."""
    serving_log = serving_service.complete_serving(db, current_staff.id, queue_entry_id)
    return CompleteResponse(serving_log=ServingLogResponse.model_validate(serving_log))


@router.post("/skip/{queue_entry_id}", response_model=SkipResponse)
def skip(queue_entry_id: int, db: DbSession, current_staff: WindowStaff) -> SkipResponse:
    """Skip an entry whose client did not come to the window."""
    entry = serving_service.skip(db, queue_entry_id, current_staff.id)
    return SkipResponse(queue_entry=build_queue_entry_response(entry))


@router.post("/logout", response_model=SuccessResponse)
def logout(db: DbSession, current_staff: WindowStaff) -> SuccessResponse:
    """Clear the online indicator immediately."""
    staff_service.clear_last_seen(db, current_staff.id)
    return SuccessResponse()
