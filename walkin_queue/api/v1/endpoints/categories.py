"""Category endpoints (public)."""

from fastapi import APIRouter

from walkin_queue.dependencies import DbSession
from walkin_queue.schemas.category import CategoryListResponse, CategoryResponse
from walkin_queue.services.category_service import category_service

router = APIRouter()


@router.get("", response_model=CategoryListResponse)
def list_categories(db: DbSession) -> CategoryListResponse:
    """All categories with their subcategories, for the join form."""
    categories = category_service.list_categories(db)
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories]
    )
