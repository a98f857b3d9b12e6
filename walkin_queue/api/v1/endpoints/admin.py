"""Administrative queue maintenance endpoints."""

from fastapi import APIRouter

from walkin_queue.dependencies import AdminStaff, DbSession
from walkin_queue.schemas.staff import ReconcileResponse, ResetResponse
from walkin_queue.services.queue_service import queue_service
from walkin_queue.services.reconciler import reconcile_stale_serving
from walkin_queue.utils.logger import logger

router = APIRouter()


@router.post("/queue/reset", response_model=ResetResponse)
def reset_queue(db: DbSession, current_staff: AdminStaff) -> ResetResponse:
    """Delete every queue entry, serving log and daily counter."""
    logger.warning(f"Queue reset requested by {current_staff.username}")
    return ResetResponse(deleted=queue_service.reset_queue(db))


@router.post("/queue/reconcile", response_model=ReconcileResponse)
def reconcile(db: DbSession, current_staff: AdminStaff) -> ReconcileResponse:
    """Resolve entries left NOW_SERVING from a previous day."""
    return ReconcileResponse(resolved=reconcile_stale_serving(db))
