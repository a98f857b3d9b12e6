"""API v1 module."""

from fastapi import APIRouter

from walkin_queue.api.v1.endpoints import admin, auth, categories, queue, staff, windows

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(queue.router, prefix="/queue", tags=["Queue"])
api_router.include_router(windows.router, prefix="/windows", tags=["Windows"])
api_router.include_router(staff.router, prefix="/staff", tags=["Staff"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
