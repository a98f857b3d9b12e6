"""Close out entries abandoned in NOW_SERVING on a previous office day."""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from walkin_queue.models import QueueEntry, QueueStatus
from walkin_queue.utils.logger import logger
from walkin_queue.utils.office_time import start_of_office_day, utcnow


def reconcile_stale_serving(db: Session, now: Optional[datetime] = None) -> int:
    """
    Mark every NOW_SERVING entry created before today as SERVED.

    A window left serving yesterday's client (staff forgot to complete it)
    would otherwise keep showing on the monitor and skew today's counts.
    Only NOW_SERVING rows are touched, so SERVED and SKIPPED entries are
    never rewritten and a second run is a no-op.

    Args:
        db: Database session (committed by this call)
        now: Naive-UTC instant treated as "now", defaults to the current time

    Returns:
        Number of entries resolved
    """
    now = now or utcnow()
    cutoff = start_of_office_day(now)
    resolved = (
        db.query(QueueEntry)
        .filter(
            QueueEntry.status == QueueStatus.NOW_SERVING,
            QueueEntry.created_at < cutoff,
        )
        .update(
            {
                QueueEntry.status: QueueStatus.SERVED,
                QueueEntry.served_at: now,
                QueueEntry.updated_at: now,
            },
            synchronize_session=False,
        )
    )
    db.commit()
    if resolved:
        logger.info(f"Auto-resolved {resolved} old serving entries to SERVED status")
    return resolved


def reconcile_quietly(db: Session, now: Optional[datetime] = None) -> int:
    """Run the reconciler for a read path; failures are logged, never raised."""
    try:
        return reconcile_stale_serving(db, now=now)
    except Exception as e:
        db.rollback()
        logger.error(f"Error auto-resolving old serving entries: {e}")
        return 0
