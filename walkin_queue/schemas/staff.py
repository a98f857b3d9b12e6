"""Staff dashboard and serving schemas."""

from datetime import datetime
from typing import List, Optional

from walkin_queue.models.enums import ClientType
from walkin_queue.schemas.common import CamelModel
from walkin_queue.schemas.queue import QueueEntryResponse, WindowResponse


class AssignWindowRequest(CamelModel):
    """Attach to a window, or release the current one with ``windowId: null``."""

    window_id: Optional[int] = None


class AssignmentResponse(CamelModel):
    id: int
    staff_id: int
    window_id: int
    is_active: bool
    assigned_at: datetime
    window: WindowResponse


class AssignWindowResponse(CamelModel):
    success: bool = True
    assignment: Optional[AssignmentResponse] = None


class DashboardStats(CamelModel):
    total_served: int
    total_skipped: int


class DashboardResponse(CamelModel):
    window: Optional[WindowResponse] = None
    queue: List[QueueEntryResponse]
    stats: DashboardStats


class ServingLogResponse(CamelModel):
    id: int
    queue_entry_id: int
    staff_id: Optional[int] = None
    category_id: int
    sub_category_id: Optional[int] = None
    client_type: ClientType
    duration: Optional[int] = None
    served_at: datetime


class CompleteResponse(CamelModel):
    success: bool = True
    serving_log: ServingLogResponse


class SkipResponse(CamelModel):
    success: bool = True
    queue_entry: QueueEntryResponse


class ResetResponse(CamelModel):
    deleted: int


class ReconcileResponse(CamelModel):
    resolved: int
