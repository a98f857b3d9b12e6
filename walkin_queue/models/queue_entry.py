"""Queue entry model and its status state machine."""

import json
from typing import List

from sqlalchemy import (
    Column,
    String,
    Text,
    DateTime,
    Integer,
    ForeignKey,
    Enum,
    Index,
)
from sqlalchemy.orm import relationship, validates
from walkin_queue.models.base import BaseModel
from walkin_queue.models.enums import (
    ClientType,
    QueueStatus,
    QUEUE_TRANSITIONS,
    TERMINAL_STATUSES,
)
from walkin_queue.utils.office_time import utcnow

CLIENT_NAME_MAX_LENGTH = 200


class QueueEntry(BaseModel):
    """
    One client's ticket, tracked WAITING -> NOW_SERVING -> SERVED/SKIPPED.

    Attributes:
        queue_number: Public ticket number, MMDDYY-NNNN, unique forever
        client_name: Name called out on the monitor
        client_type: REGULAR or one of the priority lanes
        category_id: Primary concern (first selected category)
        sub_category_id: Primary sub-concern (first selected subcategory)
        concern_category_ids: JSON list of every selected category id
        concern_sub_category_ids: JSON list of every selected subcategory id
        status: Current state
        window_id: Window that claimed the entry; NULL while unclaimed
        skipped_by_staff_id: Staff member who skipped the entry
        joined_at: When the client joined the queue (FIFO key)
        served_at: When the entry was completed or auto-resolved
    """

    __tablename__ = "queue_entries"

    queue_number = Column(String(32), unique=True, nullable=False)
    client_name = Column(String(CLIENT_NAME_MAX_LENGTH), nullable=False)
    client_type = Column(Enum(ClientType), nullable=False, default=ClientType.REGULAR)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id"), nullable=True)
    concern_category_ids = Column(Text, nullable=True)
    concern_sub_category_ids = Column(Text, nullable=True)

    status = Column(Enum(QueueStatus), nullable=False, default=QueueStatus.WAITING)
    window_id = Column(Integer, ForeignKey("windows.id", ondelete="SET NULL"), nullable=True)
    skipped_by_staff_id = Column(
        Integer, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True
    )

    joined_at = Column(DateTime, default=utcnow, nullable=False)
    served_at = Column(DateTime, nullable=True)

    # Relationships
    category = relationship("Category")
    sub_category = relationship("SubCategory")
    window = relationship("Window", back_populates="queue_entries")
    skipped_by = relationship("Staff", foreign_keys=[skipped_by_staff_id])
    serving_logs = relationship("ServingLog", back_populates="queue_entry")

    __table_args__ = (
        Index("idx_queue_entry_status_created", "status", "created_at"),
        Index("idx_queue_entry_window_status", "window_id", "status"),
        Index("idx_queue_entry_joined", "joined_at"),
        Index("idx_queue_entry_category", "category_id"),
    )

    @validates("client_name")
    def validate_client_name(self, key, value):
        """Validate client name is not empty."""
        if not value or not value.strip():
            raise ValueError("Client name cannot be empty")
        return value.strip()

    @property
    def is_priority(self) -> bool:
        return ClientType(self.client_type).is_priority

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def can_transition_to(self, new_status: QueueStatus) -> bool:
        """Check whether the state machine allows moving to ``new_status``."""
        return new_status in QUEUE_TRANSITIONS[QueueStatus(self.status)]

    @property
    def category_id_list(self) -> List[int]:
        return _load_ids(self.concern_category_ids, self.category_id)

    @property
    def sub_category_id_list(self) -> List[int]:
        return _load_ids(self.concern_sub_category_ids, self.sub_category_id)

    def __repr__(self):
        return (
            f"<QueueEntry(id={self.id}, queue_number={self.queue_number}, "
            f"status={self.status}, window_id={self.window_id})>"
        )


def _load_ids(raw, primary) -> List[int]:
    """Decode a stored id list, falling back to the primary id for old rows."""
    if raw:
        try:
            return [int(v) for v in json.loads(raw)]
        except (TypeError, ValueError):
            pass
    return [primary] if primary is not None else []
