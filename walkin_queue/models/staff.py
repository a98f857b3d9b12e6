"""Staff accounts for window operators and administrators."""

from sqlalchemy import Column, String, Boolean, Enum, DateTime, Index
from sqlalchemy.orm import relationship, validates
from walkin_queue.models.base import BaseModel
from walkin_queue.models.enums import StaffRole


class Staff(BaseModel):
    """
    Staff model for authentication and window operation.

    Attributes:
        username: Unique username for login
        name: Display name shown on the public monitor
        role: ADMIN or STAFF
        active: Whether the account may log in
        last_seen_at: Last dashboard poll, cleared on logout (online indicator)
    """

    __tablename__ = "staff"

    username = Column(String(50), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    role = Column(Enum(StaffRole), nullable=False, default=StaffRole.STAFF)
    active = Column(Boolean, default=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    last_seen_at = Column(DateTime, nullable=True)

    # Relationships
    assignments = relationship(
        "WindowAssignment", back_populates="staff", cascade="all, delete-orphan"
    )
    specializations = relationship(
        "StaffCategory", back_populates="staff", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_staff_username", "username"),
        Index("idx_staff_role_active", "role", "active"),
    )

    @validates("username")
    def validate_username(self, key, value):
        """Validate username is not empty and properly formatted."""
        if not value or not value.strip():
            raise ValueError("Username cannot be empty")
        value = value.strip().lower()
        if not value.replace("_", "").replace(".", "").isalnum():
            raise ValueError(
                "Username must contain only letters, numbers, dots and underscores"
            )
        return value

    @validates("name")
    def validate_name(self, key, value):
        if not value or not value.strip():
            raise ValueError("Name cannot be empty")
        return value.strip()

    @property
    def is_admin(self):
        """Check if staff member is an administrator."""
        return self.role == StaffRole.ADMIN

    def __repr__(self):
        return f"<Staff(id={self.id}, username={self.username}, role={self.role})>"
