"""Category lookups used for admission validation and the join form."""

from typing import Iterable, List

from sqlalchemy.orm import Session, selectinload

from walkin_queue.models import Category, SubCategory
from walkin_queue.services.base import BaseService


class CategoryService(BaseService[Category]):
    """Read-only access to concern categories and subcategories."""

    not_found_message = "Category not found"

    def __init__(self):
        super().__init__(Category)

    def list_categories(self, db: Session) -> List[Category]:
        """All categories with their subcategories, ordered by name."""
        return (
            db.query(Category)
            .options(selectinload(Category.sub_categories))
            .order_by(Category.name)
            .all()
        )

    def resolve_categories(self, db: Session, ids: Iterable[int]) -> List[Category]:
        """
        Load the categories with the given ids.

        Unknown ids are simply absent from the result; callers compare lengths
        to detect them.
        """
        ids = list(ids)
        if not ids:
            return []
        return db.query(Category).filter(Category.id.in_(ids)).all()

    def resolve_sub_categories(self, db: Session, ids: Iterable[int]) -> List[SubCategory]:
        ids = list(ids)
        if not ids:
            return []
        return db.query(SubCategory).filter(SubCategory.id.in_(ids)).all()


category_service = CategoryService()
