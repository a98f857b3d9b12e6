"""Queue admission and public queue reads."""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from walkin_queue.core.exceptions import NotFound, ValidationError
from walkin_queue.models import (
    ACTIVE_STATUSES,
    ClientType,
    DailyCounter,
    QueueEntry,
    QueueStatus,
    ServingLog,
    Staff,
    Window,
)
from walkin_queue.models.queue_entry import CLIENT_NAME_MAX_LENGTH
from walkin_queue.services.base import BaseService
from walkin_queue.services.category_service import category_service
from walkin_queue.services.queue_number_service import queue_number_service
from walkin_queue.services.reconciler import reconcile_quietly
from walkin_queue.services.window_service import window_service
from walkin_queue.utils.logger import logger
from walkin_queue.utils.office_time import start_of_office_day, utcnow


@dataclass
class WindowStatus:
    """What the public monitor shows for one window."""

    window: Window
    staff: Optional[Staff]
    current_serving: Optional[QueueEntry]


@dataclass
class QueueStats:
    waiting: int
    serving: int


class QueueService(BaseService[QueueEntry]):
    """
    Service for client admission and the public queue views.

    Provides functionality for:
    - Joining the queue (validation, queue number, WAITING entry)
    - Looking up an entry by its public queue number
    - People-ahead counts and waiting/serving totals for today
    - Current serving entry per window for the monitor
    - Administrative reset of the whole queue
    """

    not_found_message = "Queue entry not found"

    def __init__(self):
        """Initialize queue service."""
        super().__init__(QueueEntry)

    def submit_queue_entry(
        self,
        db: Session,
        client_name: str,
        client_type,
        category_ids: Iterable[int],
        sub_category_ids: Optional[Iterable[int]] = None,
        now: Optional[datetime] = None,
    ) -> QueueEntry:
        """
        Admit a client into the queue.

        The first category/subcategory becomes the primary concern used for
        staff filtering; the full selections are kept for reporting.

        Args:
            db: Database session
            client_name: Name called on the monitor
            client_type: One of the ClientType values
            category_ids: Selected categories, at least one
            sub_category_ids: Selected subcategories, each under a selected category
            now: Naive-UTC join time, defaults to the current time

        Returns:
            The new WAITING entry

        Raises:
            ValidationError: If the name, type or category selection is invalid
        """
        name = (client_name or "").strip()
        if not name:
            raise ValidationError("Client name is required")
        if len(name) > CLIENT_NAME_MAX_LENGTH:
            raise ValidationError("Client name is too long")

        try:
            client_type = ClientType(client_type)
        except ValueError:
            raise ValidationError("Invalid client type")

        category_ids = _unique_ids(category_ids, "category")
        sub_category_ids = _unique_ids(sub_category_ids or [], "subcategory")
        if not category_ids:
            raise ValidationError("Category is required")

        categories = category_service.resolve_categories(db, category_ids)
        if len(categories) != len(category_ids):
            raise ValidationError("Invalid category")

        if sub_category_ids:
            sub_categories = category_service.resolve_sub_categories(db, sub_category_ids)
            selected = set(category_ids)
            if len(sub_categories) != len(sub_category_ids) or any(
                s.category_id not in selected for s in sub_categories
            ):
                raise ValidationError("Invalid subcategory")

        queue_number = queue_number_service.issue_queue_number(db, now=now)
        joined_at = now or utcnow()

        entry = QueueEntry(
            queue_number=queue_number,
            client_name=name,
            client_type=client_type,
            category_id=category_ids[0],
            sub_category_id=sub_category_ids[0] if sub_category_ids else None,
            concern_category_ids=json.dumps(category_ids),
            concern_sub_category_ids=json.dumps(sub_category_ids) if sub_category_ids else None,
            status=QueueStatus.WAITING,
            window_id=None,
            joined_at=joined_at,
            created_at=joined_at,
            updated_at=joined_at,
        )

        try:
            db.add(entry)
            db.commit()
            db.refresh(entry)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error creating queue entry {queue_number}: {e}")
            raise

        logger.info(
            f"{entry.queue_number} joined ({client_type.value}, category {entry.category_id})"
        )
        return entry

    def get_by_number(self, db: Session, queue_number: str) -> QueueEntry:
        """Load an entry with its category detail by public queue number."""
        entry = (
            db.query(QueueEntry)
            .options(
                joinedload(QueueEntry.category),
                joinedload(QueueEntry.sub_category),
                joinedload(QueueEntry.window),
            )
            .filter(QueueEntry.queue_number == queue_number.strip())
            .first()
        )
        if entry is None:
            raise NotFound("Queue entry not found")
        return entry

    def people_ahead(self, db: Session, queue_number: str, now: Optional[datetime] = None) -> int:
        """
        Count today's active entries that joined before this one.

        Args:
            db: Database session
            queue_number: Public queue number of the target entry
            now: Naive-UTC instant defining "today"

        Returns:
            Number of WAITING or NOW_SERVING entries ahead
        """
        entry = self.get_by_number(db, queue_number)
        return (
            db.query(QueueEntry)
            .filter(
                QueueEntry.status.in_(ACTIVE_STATUSES),
                QueueEntry.joined_at < entry.joined_at,
                QueueEntry.created_at >= start_of_office_day(now),
            )
            .count()
        )

    def public_stats(self, db: Session, now: Optional[datetime] = None) -> QueueStats:
        """Waiting and serving totals for today."""
        reconcile_quietly(db, now=now)
        today = start_of_office_day(now)

        def _count(status: QueueStatus) -> int:
            return (
                db.query(QueueEntry)
                .filter(QueueEntry.status == status, QueueEntry.created_at >= today)
                .count()
            )

        return QueueStats(
            waiting=_count(QueueStatus.WAITING),
            serving=_count(QueueStatus.NOW_SERVING),
        )

    def public_windows(self, db: Session, now: Optional[datetime] = None) -> List[WindowStatus]:
        """Active windows with their staff and today's NOW_SERVING entry."""
        reconcile_quietly(db, now=now)
        today = start_of_office_day(now)

        statuses = []
        for window in window_service.list_active_windows(db):
            current = (
                db.query(QueueEntry)
                .options(
                    joinedload(QueueEntry.category),
                    joinedload(QueueEntry.sub_category),
                )
                .filter(
                    QueueEntry.window_id == window.id,
                    QueueEntry.status == QueueStatus.NOW_SERVING,
                    QueueEntry.created_at >= today,
                )
                .order_by(QueueEntry.updated_at.desc())
                .first()
            )
            statuses.append(
                WindowStatus(
                    window=window,
                    staff=window_service.active_staff_for_window(db, window.id),
                    current_serving=current,
                )
            )
        return statuses

    def reset_queue(self, db: Session) -> int:
        """
        Delete every queue entry, serving log and daily counter.

        Returns:
            Number of queue entries deleted
        """
        try:
            db.query(ServingLog).delete(synchronize_session=False)
            deleted = db.query(QueueEntry).delete(synchronize_session=False)
            db.query(DailyCounter).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error resetting queue: {e}")
            raise
        logger.warning(f"Queue reset: {deleted} entries deleted")
        return deleted


def _unique_ids(values: Iterable, label: str) -> List[int]:
    """Coerce ids to int and drop duplicates, keeping first-seen order."""
    try:
        return list(dict.fromkeys(int(v) for v in values if v is not None and v != ""))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}")


queue_service = QueueService()
