"""Queue endpoints for kiosks and the public monitor (no auth)."""

from fastapi import APIRouter, Request

from walkin_queue.config import settings
from walkin_queue.core.rate_limit import limiter
from walkin_queue.dependencies import DbSession
from walkin_queue.schemas.auth import StaffBrief
from walkin_queue.schemas.queue import (
    PeopleAheadResponse,
    QueueEntryEnvelope,
    QueueJoinRequest,
    QueueJoinResponse,
    QueueStatsResponse,
    WindowStatusListResponse,
    WindowStatusResponse,
    build_queue_entry_response,
)
from walkin_queue.services.queue_service import WindowStatus, queue_service
from walkin_queue.utils.office_time import office_today

router = APIRouter()


def build_window_status_response(window_status: WindowStatus) -> WindowStatusResponse:
    return WindowStatusResponse(
        id=window_status.window.id,
        label=window_status.window.label,
        staff=StaffBrief.model_validate(window_status.staff) if window_status.staff else None,
        current_serving=(
            build_queue_entry_response(window_status.current_serving)
            if window_status.current_serving
            else None
        ),
    )


@router.post("/join", response_model=QueueJoinResponse)
@limiter.limit(settings.join_rate_limit)
def join_queue(request: Request, join_in: QueueJoinRequest, db: DbSession) -> QueueJoinResponse:
    """Join the queue and receive a queue number."""
    entry = queue_service.submit_queue_entry(
        db,
        client_name=join_in.client_name,
        client_type=join_in.client_type,
        category_ids=join_in.selected_category_ids(),
        sub_category_ids=join_in.selected_sub_category_ids(),
    )
    entry = queue_service.get_by_number(db, entry.queue_number)
    return QueueJoinResponse(
        queue_entry=build_queue_entry_response(entry),
        date=office_today(entry.joined_at).isoformat(),
    )


@router.get("/public/windows", response_model=WindowStatusListResponse)
def public_windows(db: DbSession) -> WindowStatusListResponse:
    """Windows and what each is serving, for the monitor."""
    return WindowStatusListResponse(
        windows=[build_window_status_response(s) for s in queue_service.public_windows(db)]
    )


@router.get("/public/stats", response_model=QueueStatsResponse)
def public_stats(db: DbSession) -> QueueStatsResponse:
    """Today's waiting and serving totals."""
    stats = queue_service.public_stats(db)
    return QueueStatsResponse(waiting=stats.waiting, serving=stats.serving)


@router.get("/{queue_number}", response_model=QueueEntryEnvelope)
def get_queue_entry(queue_number: str, db: DbSession) -> QueueEntryEnvelope:
    """Look up an entry by its queue number."""
    entry = queue_service.get_by_number(db, queue_number)
    return QueueEntryEnvelope(queue_entry=build_queue_entry_response(entry))


@router.get("/{queue_number}/ahead", response_model=PeopleAheadResponse)
def people_ahead(queue_number: str, db: DbSession) -> PeopleAheadResponse:
    """How many of today's active entries joined before this one."""
    return PeopleAheadResponse(people_ahead=queue_service.people_ahead(db, queue_number))
