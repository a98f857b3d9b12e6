"""Authentication schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from walkin_queue.models.enums import StaffRole
from walkin_queue.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """Login request body."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class StaffResponse(CamelModel):
    """Staff account as returned to clients."""

    id: int
    username: str
    name: str
    role: StaffRole
    active: bool
    last_seen_at: Optional[datetime] = None
    created_at: datetime


class StaffBrief(CamelModel):
    """Staff fields shown on the public monitor."""

    id: int
    name: str


class Token(CamelModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    staff: StaffResponse


class VerifyResponse(CamelModel):
    valid: bool = True
    staff: StaffResponse
