"""Window assignment lookups and changes."""

from typing import List, Optional

from sqlalchemy.orm import Session

from walkin_queue.core.exceptions import NotFound, ValidationError
from walkin_queue.models import Staff, Window, WindowAssignment
from walkin_queue.services.base import BaseService
from walkin_queue.utils.logger import logger
from walkin_queue.utils.office_time import utcnow


class WindowService(BaseService[Window]):
    """
    Service for windows and the staff attached to them.

    Provides functionality for:
    - Resolving a staff member's active window (claim precondition)
    - Attaching a staff member to a window, or releasing it
    - Listing active windows for the public monitor
    """

    not_found_message = "Window not found"

    def __init__(self):
        super().__init__(Window)

    def get_active_assignment(self, db: Session, staff_id: int) -> Optional[WindowAssignment]:
        return (
            db.query(WindowAssignment)
            .filter(
                WindowAssignment.staff_id == staff_id,
                WindowAssignment.is_active.is_(True),
            )
            .order_by(WindowAssignment.assigned_at.desc(), WindowAssignment.id.desc())
            .first()
        )

    def get_active_window_for_staff(self, db: Session, staff_id: int) -> Optional[int]:
        """Window id the staff member is currently attached to, if any."""
        assignment = self.get_active_assignment(db, staff_id)
        return assignment.window_id if assignment else None

    def assign_window(
        self, db: Session, staff_id: int, window_id: Optional[int]
    ) -> Optional[WindowAssignment]:
        """
        Attach a staff member to a window, replacing any active assignment.

        Args:
            db: Database session
            staff_id: Staff member to attach
            window_id: Target window, or None to release the current one

        Returns:
            The new assignment, or None when releasing

        Raises:
            NotFound: If the staff member does not exist
            ValidationError: If the window does not exist or is inactive
        """
        staff = db.query(Staff).filter(Staff.id == staff_id).first()
        if staff is None:
            raise NotFound("Staff account no longer exists")

        # Delete rather than deactivate so history never holds two active rows
        db.query(WindowAssignment).filter(
            WindowAssignment.staff_id == staff_id,
            WindowAssignment.is_active.is_(True),
        ).delete(synchronize_session=False)

        if window_id is None:
            staff.last_seen_at = None
            db.commit()
            logger.info(f"Staff {staff_id} released their window")
            return None

        window = self.get(db, window_id)
        if window is None or not window.is_active:
            db.rollback()
            raise ValidationError("Selected window does not exist. Please refresh and try again.")

        assignment = WindowAssignment(
            staff_id=staff_id, window_id=window_id, is_active=True, assigned_at=utcnow()
        )
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        logger.info(f"Staff {staff_id} assigned to window {window.label}")
        return assignment

    def list_active_windows(self, db: Session) -> List[Window]:
        return (
            db.query(Window)
            .filter(Window.is_active.is_(True))
            .order_by(Window.label)
            .all()
        )

    def active_staff_for_window(self, db: Session, window_id: int) -> Optional[Staff]:
        assignment = (
            db.query(WindowAssignment)
            .filter(
                WindowAssignment.window_id == window_id,
                WindowAssignment.is_active.is_(True),
            )
            .order_by(WindowAssignment.assigned_at.desc())
            .first()
        )
        return assignment.staff if assignment else None


window_service = WindowService()
