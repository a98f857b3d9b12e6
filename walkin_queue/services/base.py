"""Base service class with common functionality."""

from typing import TypeVar, Generic, Type, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from walkin_queue.core.exceptions import NotFound
from walkin_queue.models.base import BaseModel
from walkin_queue.utils.logger import logger

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseService(Generic[ModelType]):
    """
    Base service class providing lookups by id.

    Subclasses set ``not_found_message`` for the NotFound raised by
    ``get_or_raise``.
    """

    not_found_message: Optional[str] = None

    def __init__(self, model: Type[ModelType]):
        """
        Initialize base service.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model
        self.model_name = model.__name__.lower()

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        """
        Get a record by ID.

        Args:
            db: Database session
            id: Record ID

        Returns:
            Model instance or None if not found
        """
        try:
            return db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.model_name} with id {id}: {e}")
            raise

    def get_or_raise(self, db: Session, id: int) -> ModelType:
        """Get a record by ID, raising NotFound when it does not exist."""
        obj = self.get(db, id)
        if obj is None:
            raise NotFound(
                self.not_found_message or f"{self.model.__name__} {id} not found"
            )
        return obj
