"""Category schemas."""

from typing import List

from walkin_queue.schemas.common import CamelModel


class SubCategoryResponse(CamelModel):
    id: int
    name: str
    category_id: int


class CategoryBrief(CamelModel):
    id: int
    name: str


class CategoryResponse(CategoryBrief):
    """Category with its subcategories, as used by the join form."""

    sub_categories: List[SubCategoryResponse] = []


class CategoryListResponse(CamelModel):
    categories: List[CategoryResponse]
