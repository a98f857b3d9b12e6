"""FastAPI dependencies for database and authentication."""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from walkin_queue.database import SessionLocal
from walkin_queue.core.security import decode_token, is_past_staff_logout_time
from walkin_queue.models import Staff, StaffRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/staff/login")


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_staff(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> Staff:
    """Get the current authenticated staff member from the JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        raise credentials_exception

    staff_id: Optional[str] = payload.get("sub")
    if staff_id is None:
        raise credentials_exception

    staff = db.query(Staff).filter(Staff.id == int(staff_id)).first()
    if staff is None:
        raise credentials_exception

    if not staff.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff account is disabled",
        )

    if staff.role == StaffRole.STAFF and is_past_staff_logout_time():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Automatic logout: staff sessions end for the day",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return staff


def require_role(*allowed_roles: StaffRole):
    """Dependency factory to require specific staff roles."""

    async def role_checker(
        current_staff: Annotated[Staff, Depends(get_current_staff)],
    ) -> Staff:
        if current_staff.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role {current_staff.role.value} not authorized for this action",
            )
        return current_staff

    return role_checker


# Common dependency annotations
DbSession = Annotated[Session, Depends(get_db)]
CurrentStaff = Annotated[Staff, Depends(get_current_staff)]
WindowStaff = Annotated[Staff, Depends(require_role(StaffRole.STAFF, StaffRole.ADMIN))]
AdminStaff = Annotated[Staff, Depends(require_role(StaffRole.ADMIN))]
