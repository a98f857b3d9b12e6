"""Staff-side queue operations: candidate view, claim, completion and skip."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from walkin_queue.core.exceptions import (
    AlreadySkipped,
    ClaimConflict,
    InvalidTransition,
    NoActiveWindow,
)
from walkin_queue.models import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    ClientType,
    QueueEntry,
    QueueStatus,
    ServingLog,
    Window,
)
from walkin_queue.services.base import BaseService
from walkin_queue.services.reconciler import reconcile_quietly
from walkin_queue.services.staff_service import staff_service
from walkin_queue.services.window_service import window_service
from walkin_queue.utils.logger import logger
from walkin_queue.utils.office_time import start_of_office_day, utcnow

# Priority lanes sort before REGULAR, then strict FIFO by join time
_PRIORITY_RANK = case((QueueEntry.client_type == ClientType.REGULAR, 1), else_=0)
CANDIDATE_ORDER = (_PRIORITY_RANK, QueueEntry.joined_at, QueueEntry.id)


@dataclass
class StaffDashboard:
    window: Optional[Window]
    queue: List[QueueEntry] = field(default_factory=list)
    total_served: int = 0
    total_skipped: int = 0


class ServingService(BaseService[QueueEntry]):
    """
    Service for window operations on queue entries.

    The claim is a single conditional UPDATE guarded on ``status = WAITING
    AND window_id IS NULL``. The database evaluates the predicate and applies
    the change as one statement, so exactly one of any number of concurrent
    claimants in any number of processes sees a row affected; everyone else
    gets ClaimConflict. No application lock is involved.
    """

    not_found_message = "Queue entry not found"

    def __init__(self):
        """Initialize serving service."""
        super().__init__(QueueEntry)

    def get_candidates(
        self,
        db: Session,
        staff_id: int,
        window_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[QueueEntry]:
        """
        Build the ordered queue view for a staff member.

        Entries already bound to the staff's window come first, followed by
        today's unclaimed WAITING entries in the staff's specialized
        categories (all categories when none are configured). Each group is
        ordered priority clients first, then by join time.

        Args:
            db: Database session
            staff_id: Staff member viewing the queue
            window_id: Active window, looked up when omitted
            now: Naive-UTC instant defining "today"

        Returns:
            Ordered entries; empty when the staff member has no window
        """
        if window_id is None:
            window_id = window_service.get_active_window_for_staff(db, staff_id)
        if window_id is None:
            return []

        today = start_of_office_day(now)
        detail = (joinedload(QueueEntry.category), joinedload(QueueEntry.sub_category))

        own = (
            db.query(QueueEntry)
            .options(*detail)
            .filter(
                QueueEntry.window_id == window_id,
                QueueEntry.status.in_(ACTIVE_STATUSES),
                QueueEntry.created_at >= today,
            )
            .order_by(*CANDIDATE_ORDER)
            .all()
        )

        pool = db.query(QueueEntry).options(*detail).filter(
            QueueEntry.status == QueueStatus.WAITING,
            QueueEntry.window_id.is_(None),
            QueueEntry.created_at >= today,
        )
        specializations = staff_service.specialization_ids(db, staff_id)
        if specializations:
            pool = pool.filter(QueueEntry.category_id.in_(specializations))

        return own + pool.order_by(*CANDIDATE_ORDER).all()

    def claim_next(
        self,
        db: Session,
        staff_id: int,
        queue_entry_id: int,
        now: Optional[datetime] = None,
    ) -> QueueEntry:
        """
        Atomically move a WAITING entry to NOW_SERVING on the staff's window.

        Args:
            db: Database session
            staff_id: Staff member claiming the entry
            queue_entry_id: Entry picked from the candidate view
            now: Naive-UTC claim time, defaults to the current time

        Returns:
            The claimed entry with category detail

        Raises:
            NoActiveWindow: If the staff member has no active window
            NotFound: If the entry does not exist
            ClaimConflict: If the entry was claimed or changed in the meantime
        """
        window_id = window_service.get_active_window_for_staff(db, staff_id)
        if window_id is None:
            raise NoActiveWindow()

        now = now or utcnow()
        try:
            claimed = (
                db.query(QueueEntry)
                .filter(
                    QueueEntry.id == queue_entry_id,
                    QueueEntry.status == QueueStatus.WAITING,
                    QueueEntry.window_id.is_(None),
                )
                .update(
                    {
                        QueueEntry.status: QueueStatus.NOW_SERVING,
                        QueueEntry.window_id: window_id,
                        QueueEntry.updated_at: now,
                    },
                    synchronize_session=False,
                )
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error claiming queue entry {queue_entry_id}: {e}")
            raise

        if claimed == 0:
            # Distinguish a lost race from a bad id
            self.get_or_raise(db, queue_entry_id)
            logger.warning(
                f"Window {window_id} lost the claim on queue entry {queue_entry_id}"
            )
            raise ClaimConflict(queue_entry_id)

        entry = (
            db.query(QueueEntry)
            .options(joinedload(QueueEntry.category), joinedload(QueueEntry.sub_category))
            .filter(QueueEntry.id == queue_entry_id)
            .one()
        )
        logger.info(f"Window {window_id} now serving {entry.queue_number}")
        return entry

    def complete_serving(
        self,
        db: Session,
        staff_id: int,
        queue_entry_id: int,
        now: Optional[datetime] = None,
    ) -> ServingLog:
        """
        Mark an entry SERVED and write its serving log.

        Duration is measured from the claim (the entry's last update) and only
        when the entry is NOW_SERVING; completing an unclaimed entry records
        no duration.

        Raises:
            NotFound: If the entry does not exist
            InvalidTransition: If the entry is already SERVED or SKIPPED
        """
        entry = self.get_or_raise(db, queue_entry_id)
        if entry.is_terminal:
            raise InvalidTransition(f"Queue entry is already {entry.status.value}")

        now = now or utcnow()
        previous_status = entry.status
        duration = None
        if previous_status == QueueStatus.NOW_SERVING:
            duration = max(0, int((now - entry.updated_at).total_seconds()))

        try:
            # Conditional on the status we just read so a concurrent skip or
            # completion cannot be overwritten
            updated = (
                db.query(QueueEntry)
                .filter(
                    QueueEntry.id == queue_entry_id,
                    QueueEntry.status == previous_status,
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
            if updated == 0:
                db.rollback()
                raise InvalidTransition("Queue entry changed, please refresh the queue")

            serving_log = ServingLog(
                queue_entry_id=entry.id,
                staff_id=staff_id,
                category_id=entry.category_id,
                sub_category_id=entry.sub_category_id,
                client_type=entry.client_type,
                duration=duration,
                served_at=now,
            )
            db.add(serving_log)
            db.commit()
            db.refresh(serving_log)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error completing queue entry {queue_entry_id}: {e}")
            raise

        logger.info(
            f"Staff {staff_id} completed queue entry {queue_entry_id} (duration={duration})"
        )
        return serving_log

    def skip(self, db: Session, queue_entry_id: int, staff_id: int) -> QueueEntry:
        """
        Mark an entry SKIPPED, recording who skipped it.

        Raises:
            NotFound: If the entry does not exist
            AlreadySkipped: If the entry is already SKIPPED
            InvalidTransition: If the entry is already SERVED
        """
        entry = self.get_or_raise(db, queue_entry_id)
        self._check_skippable(entry)

        try:
            updated = (
                db.query(QueueEntry)
                .filter(
                    QueueEntry.id == queue_entry_id,
                    QueueEntry.status.notin_(TERMINAL_STATUSES),
                )
                .update(
                    {
                        QueueEntry.status: QueueStatus.SKIPPED,
                        QueueEntry.skipped_by_staff_id: staff_id,
                    },
                    synchronize_session=False,
                )
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error skipping queue entry {queue_entry_id}: {e}")
            raise

        db.refresh(entry)
        if updated == 0:
            # Lost to a concurrent skip or completion
            self._check_skippable(entry)

        logger.info(f"Staff {staff_id} skipped {entry.queue_number}")
        return entry

    def dashboard(
        self, db: Session, staff_id: int, now: Optional[datetime] = None
    ) -> StaffDashboard:
        """Reconcile stale entries, then build the staff member's view for today."""
        reconcile_quietly(db, now=now)

        assignment = window_service.get_active_assignment(db, staff_id)
        today = start_of_office_day(now)
        total_served = (
            db.query(ServingLog)
            .filter(ServingLog.staff_id == staff_id, ServingLog.served_at >= today)
            .count()
        )
        total_skipped = (
            db.query(QueueEntry)
            .filter(
                QueueEntry.status == QueueStatus.SKIPPED,
                QueueEntry.skipped_by_staff_id == staff_id,
                QueueEntry.created_at >= today,
            )
            .count()
        )

        if assignment is None:
            return StaffDashboard(
                window=None, total_served=total_served, total_skipped=total_skipped
            )

        queue = self.get_candidates(db, staff_id, window_id=assignment.window_id, now=now)
        logger.debug(f"Staff {staff_id} dashboard: {len(queue)} candidate(s)")
        return StaffDashboard(
            window=assignment.window,
            queue=queue,
            total_served=total_served,
            total_skipped=total_skipped,
        )

    @staticmethod
    def _check_skippable(entry: QueueEntry) -> None:
        if entry.status == QueueStatus.SKIPPED:
            raise AlreadySkipped()
        if entry.status == QueueStatus.SERVED:
            raise InvalidTransition("Queue entry is already SERVED")


serving_service = ServingService()
