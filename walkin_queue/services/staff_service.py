"""Staff service for authentication and account management."""

from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from walkin_queue.core.exceptions import ValidationError
from walkin_queue.core.security import get_password_hash, verify_password
from walkin_queue.models import Staff, StaffCategory, StaffRole
from walkin_queue.services.base import BaseService
from walkin_queue.utils.logger import logger
from walkin_queue.utils.office_time import utcnow


class StaffService(BaseService[Staff]):
    """
    Service for managing staff accounts.

    Provides functionality for:
    - Account creation with bcrypt password hashing
    - Authentication by username and role
    - Category specializations
    - Online indicator (last seen) updates
    """

    not_found_message = "Staff not found"

    def __init__(self):
        """Initialize staff service."""
        super().__init__(Staff)

    def create_staff(
        self,
        db: Session,
        username: str,
        name: str,
        password: str,
        role: StaffRole = StaffRole.STAFF,
        category_ids: Iterable[int] = (),
    ) -> Staff:
        """
        Create a new staff account with hashed password.

        Args:
            db: Database session
            username: Unique username
            name: Display name
            password: Plain text password (at least 6 characters)
            role: ADMIN or STAFF
            category_ids: Categories this staff member specializes in

        Returns:
            Created staff member

        Raises:
            ValidationError: If the username exists or the password is too short
        """
        if len(password) < 6:
            raise ValidationError("Password must be at least 6 characters")

        if self.get_by_username(db, username):
            raise ValidationError(f"Username '{username}' already exists")

        try:
            staff = Staff(
                username=username,
                name=name,
                password_hash=get_password_hash(password),
                role=role,
                active=True,
            )
        except ValueError as e:
            raise ValidationError(str(e))

        for category_id in dict.fromkeys(category_ids):
            staff.specializations.append(StaffCategory(category_id=category_id))

        try:
            db.add(staff)
            db.commit()
            db.refresh(staff)
        except IntegrityError as e:
            db.rollback()
            logger.error(f"Error creating staff: {e}")
            raise ValidationError(
                "Error creating staff - username may already exist or a category is invalid"
            )

        logger.info(f"Created {role.value} account {staff.username}")
        return staff

    def authenticate(
        self,
        db: Session,
        username: str,
        password: str,
        role: Optional[StaffRole] = None,
    ) -> Optional[Staff]:
        """
        Authenticate a staff member with username and password.

        Args:
            db: Database session
            username: Username
            password: Plain text password
            role: Required role, if the login form is role specific

        Returns:
            Authenticated staff member or None
        """
        staff = self.get_by_username(db, username)

        if not staff:
            logger.warning(f"Authentication failed - user not found: {username}")
            return None

        if not staff.active:
            logger.warning(f"Authentication failed - inactive user: {username}")
            return None

        if role is not None and staff.role != role:
            logger.warning(f"Authentication failed - {username} is not {role.value}")
            return None

        if not verify_password(password, staff.password_hash):
            logger.warning(f"Authentication failed - invalid password: {username}")
            return None

        logger.info(f"Staff authenticated successfully: {username}")
        return staff

    def get_by_username(self, db: Session, username: str) -> Optional[Staff]:
        return (
            db.query(Staff)
            .filter(Staff.username == username.strip().lower())
            .first()
        )

    def specialization_ids(self, db: Session, staff_id: int) -> list[int]:
        """Category ids the staff member specializes in (empty means all)."""
        rows = (
            db.query(StaffCategory.category_id)
            .filter(StaffCategory.staff_id == staff_id)
            .all()
        )
        return [row[0] for row in rows]

    def touch_last_seen(self, db: Session, staff_id: int) -> None:
        """Record a dashboard poll for the online indicator."""
        db.query(Staff).filter(Staff.id == staff_id).update(
            {Staff.last_seen_at: utcnow()}, synchronize_session=False
        )
        db.commit()

    def clear_last_seen(self, db: Session, staff_id: int) -> None:
        db.query(Staff).filter(Staff.id == staff_id).update(
            {Staff.last_seen_at: None}, synchronize_session=False
        )
        db.commit()


staff_service = StaffService()
