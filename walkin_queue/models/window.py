"""Service windows and the staff assigned to them."""

from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, validates
from walkin_queue.models.base import BaseModel
from walkin_queue.utils.office_time import utcnow


class Window(BaseModel):
    """A physical service counter."""

    __tablename__ = "windows"

    label = Column(String(50), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    assignments = relationship(
        "WindowAssignment", back_populates="window", cascade="all, delete-orphan"
    )
    queue_entries = relationship("QueueEntry", back_populates="window")

    @validates("label")
    def validate_label(self, key, value):
        if not value or not value.strip():
            raise ValueError("Window label cannot be empty")
        return value.strip()

    def __repr__(self):
        return f"<Window(id={self.id}, label={self.label})>"


class WindowAssignment(BaseModel):
    """
    Attachment of a staff member to a window.

    A staff member has at most one active assignment; reassigning removes the
    previous active rows rather than flipping them, so the history table never
    accumulates conflicting active rows.
    """

    __tablename__ = "window_assignments"

    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    window_id = Column(Integer, ForeignKey("windows.id", ondelete="CASCADE"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    assigned_at = Column(DateTime, default=utcnow, nullable=False)

    staff = relationship("Staff", back_populates="assignments")
    window = relationship("Window", back_populates="assignments")

    __table_args__ = (
        Index("idx_window_assignment_staff_active", "staff_id", "is_active"),
        Index("idx_window_assignment_window_active", "window_id", "is_active"),
    )
