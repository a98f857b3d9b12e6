"""Concern categories, subcategories and staff specializations."""

from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship, validates
from walkin_queue.models.base import BaseModel


class Category(BaseModel):
    """Top-level concern a client can queue for (e.g. "Transcript of Records")."""

    __tablename__ = "categories"

    name = Column(String(200), unique=True, nullable=False)

    sub_categories = relationship(
        "SubCategory",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="SubCategory.name",
    )

    @validates("name")
    def validate_name(self, key, value):
        if not value or not value.strip():
            raise ValueError("Category name cannot be empty")
        return value.strip()


class SubCategory(BaseModel):
    """Specific concern under a category."""

    __tablename__ = "sub_categories"

    name = Column(String(200), nullable=False)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )

    category = relationship("Category", back_populates="sub_categories")

    __table_args__ = (
        UniqueConstraint("category_id", "name", name="uq_sub_category_name"),
        Index("idx_sub_category_category", "category_id"),
    )

    @validates("name")
    def validate_name(self, key, value):
        if not value or not value.strip():
            raise ValueError("Subcategory name cannot be empty")
        return value.strip()


class StaffCategory(BaseModel):
    """Category a staff member specializes in.

    A staff member without any rows here is eligible for every category.
    """

    __tablename__ = "staff_categories"

    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )

    staff = relationship("Staff", back_populates="specializations")
    category = relationship("Category")

    __table_args__ = (
        UniqueConstraint("staff_id", "category_id", name="uq_staff_category"),
    )
