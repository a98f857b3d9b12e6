"""Queue entry schemas for request/response validation."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from walkin_queue.models import QueueEntry
from walkin_queue.models.enums import ClientType, QueueStatus
from walkin_queue.schemas.auth import StaffBrief
from walkin_queue.schemas.category import CategoryBrief, SubCategoryResponse
from walkin_queue.schemas.common import CamelModel


class QueueJoinRequest(CamelModel):
    """
    Join request from the kiosk.

    Accepts the multi-select ``categoryIds``/``subCategoryIds`` lists as well
    as the older single ``categoryId``/``subCategoryId`` fields. Name, type
    and category checks happen in the service so they surface as 400s.
    """

    client_name: str = ""
    client_type: str = ""
    category_ids: List[int] = Field(default_factory=list)
    sub_category_ids: List[int] = Field(default_factory=list)
    category_id: Optional[int] = None
    sub_category_id: Optional[int] = None

    @field_validator("client_name", "client_type", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    def selected_category_ids(self) -> List[int]:
        ids = list(self.category_ids)
        if self.category_id is not None and self.category_id not in ids:
            ids.insert(0, self.category_id)
        return ids

    def selected_sub_category_ids(self) -> List[int]:
        ids = list(self.sub_category_ids)
        if self.sub_category_id is not None and self.sub_category_id not in ids:
            ids.insert(0, self.sub_category_id)
        return ids


class WindowResponse(CamelModel):
    id: int
    label: str
    is_active: bool


class QueueEntryResponse(CamelModel):
    """Queue entry response schema."""

    id: int
    queue_number: str
    client_name: str
    client_type: ClientType
    is_priority: bool
    status: QueueStatus
    category_id: int
    sub_category_id: Optional[int] = None
    category_ids: List[int] = []
    sub_category_ids: List[int] = []
    category: Optional[CategoryBrief] = None
    sub_category: Optional[SubCategoryResponse] = None
    window_id: Optional[int] = None
    window: Optional[WindowResponse] = None
    skipped_by_staff_id: Optional[int] = None
    joined_at: datetime
    created_at: datetime
    updated_at: datetime
    served_at: Optional[datetime] = None


def build_queue_entry_response(entry: QueueEntry) -> QueueEntryResponse:
    """Build QueueEntryResponse with the decoded concern lists."""
    return QueueEntryResponse(
        id=entry.id,
        queue_number=entry.queue_number,
        client_name=entry.client_name,
        client_type=entry.client_type,
        is_priority=entry.is_priority,
        status=entry.status,
        category_id=entry.category_id,
        sub_category_id=entry.sub_category_id,
        category_ids=entry.category_id_list,
        sub_category_ids=entry.sub_category_id_list,
        category=CategoryBrief.model_validate(entry.category) if entry.category else None,
        sub_category=(
            SubCategoryResponse.model_validate(entry.sub_category)
            if entry.sub_category
            else None
        ),
        window_id=entry.window_id,
        window=WindowResponse.model_validate(entry.window) if entry.window else None,
        skipped_by_staff_id=entry.skipped_by_staff_id,
        joined_at=entry.joined_at,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
        served_at=entry.served_at,
    )


class QueueJoinResponse(CamelModel):
    queue_entry: QueueEntryResponse
    date: str  # office-local ISO date the number was issued for


class QueueEntryEnvelope(CamelModel):
    queue_entry: QueueEntryResponse


class PeopleAheadResponse(CamelModel):
    people_ahead: int


class QueueStatsResponse(CamelModel):
    waiting: int
    serving: int


class WindowStatusResponse(CamelModel):
    """One window on the public monitor."""

    id: int
    label: str
    staff: Optional[StaffBrief] = None
    current_serving: Optional[QueueEntryResponse] = None


class WindowStatusListResponse(CamelModel):
    windows: List[WindowStatusResponse]
