"""Authentication endpoints."""

from fastapi import APIRouter, HTTPException, Request, status

from walkin_queue.config import settings
from walkin_queue.core.rate_limit import limiter
from walkin_queue.core.security import create_access_token, is_past_staff_logout_time
from walkin_queue.dependencies import CurrentStaff, DbSession
from walkin_queue.models import Staff, StaffRole
from walkin_queue.schemas.auth import LoginRequest, StaffResponse, Token, VerifyResponse
from walkin_queue.services.staff_service import staff_service

router = APIRouter()


def _issue_token(staff: Staff) -> Token:
    access_token = create_access_token(
        subject=staff.id,
        additional_claims={"role": staff.role.value},
    )
    return Token(access_token=access_token, staff=StaffResponse.model_validate(staff))


@router.post("/staff/login", response_model=Token)
@limiter.limit(settings.login_rate_limit)
def staff_login(request: Request, credentials: LoginRequest, db: DbSession) -> Token:
    """Authenticate a window operator."""
    staff = staff_service.authenticate(
        db, credentials.username, credentials.password, role=StaffRole.STAFF
    )
    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if is_past_staff_logout_time():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Staff sessions have ended for the day",
        )

    staff_service.touch_last_seen(db, staff.id)
    db.refresh(staff)
    return _issue_token(staff)


@router.post("/admin/login", response_model=Token)
@limiter.limit(settings.login_rate_limit)
def admin_login(request: Request, credentials: LoginRequest, db: DbSession) -> Token:
    """Authenticate an administrator."""
    staff = staff_service.authenticate(
        db, credentials.username, credentials.password, role=StaffRole.ADMIN
    )
    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(staff)


@router.get("/verify", response_model=VerifyResponse)
async def verify(current_staff: CurrentStaff) -> VerifyResponse:
    """Check that the bearer token is still valid."""
    return VerifyResponse(staff=StaffResponse.model_validate(current_staff))
