"""Services for the walk-in queue."""

from .base import BaseService
from .category_service import CategoryService, category_service
from .window_service import WindowService, window_service
from .staff_service import StaffService, staff_service
from .queue_number_service import QueueNumberService, queue_number_service
from .queue_service import QueueService, QueueStats, WindowStatus, queue_service
from .serving_service import ServingService, StaffDashboard, serving_service
from .reconciler import reconcile_stale_serving, reconcile_quietly

__all__ = [
    "BaseService",
    "CategoryService",
    "category_service",
    "WindowService",
    "window_service",
    "StaffService",
    "staff_service",
    "QueueNumberService",
    "queue_number_service",
    "QueueService",
    "QueueStats",
    "WindowStatus",
    "queue_service",
    "ServingService",
    "StaffDashboard",
    "serving_service",
    "reconcile_stale_serving",
    "reconcile_quietly",
]
