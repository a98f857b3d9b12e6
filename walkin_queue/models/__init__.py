"""Database models for the walk-in queue service."""

# Import all models
from walkin_queue.models.base import BaseModel
from walkin_queue.models.enums import (
    StaffRole,
    ClientType,
    QueueStatus,
    QUEUE_TRANSITIONS,
    TERMINAL_STATUSES,
    ACTIVE_STATUSES,
)
from walkin_queue.models.staff import Staff
from walkin_queue.models.window import Window, WindowAssignment
from walkin_queue.models.category import Category, SubCategory, StaffCategory
from walkin_queue.models.queue_entry import QueueEntry
from walkin_queue.models.daily_counter import DailyCounter
from walkin_queue.models.serving_log import ServingLog

# Export all models and enums
__all__ = [
    # Base
    "BaseModel",
    # Enums
    "StaffRole",
    "ClientType",
    "QueueStatus",
    "QUEUE_TRANSITIONS",
    "TERMINAL_STATUSES",
    "ACTIVE_STATUSES",
    # Models
    "Staff",
    "Window",
    "WindowAssignment",
    "Category",
    "SubCategory",
    "StaffCategory",
    "QueueEntry",
    "DailyCounter",
    "ServingLog",
]
