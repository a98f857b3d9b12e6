"""Immutable record of a completed service, kept for reporting."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship
from walkin_queue.models.base import BaseModel
from walkin_queue.models.enums import ClientType
from walkin_queue.utils.office_time import utcnow


class ServingLog(BaseModel):
    """
    Serving log row written when a staff member completes an entry.

    Attributes:
        queue_entry_id: Completed entry
        staff_id: Staff member who completed it
        category_id / sub_category_id: Primary concern at completion time
        client_type: Client type at completion time
        duration: Seconds between the claim and completion, NULL if the
            entry was never claimed
        served_at: Completion time
    """

    __tablename__ = "serving_logs"

    queue_entry_id = Column(
        Integer, ForeignKey("queue_entries.id", ondelete="CASCADE"), nullable=False
    )
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id"), nullable=True)
    client_type = Column(Enum(ClientType), nullable=False)
    duration = Column(Integer, nullable=True)
    served_at = Column(DateTime, default=utcnow, nullable=False)

    queue_entry = relationship("QueueEntry", back_populates="serving_logs")
    staff = relationship("Staff")
    category = relationship("Category")
    sub_category = relationship("SubCategory")

    __table_args__ = (
        Index("idx_serving_log_staff_served", "staff_id", "served_at"),
    )
