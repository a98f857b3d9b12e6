"""Database seeding for first-time startup."""

from sqlalchemy import text
from sqlalchemy.orm import Session

from walkin_queue.core.security import get_password_hash
from walkin_queue.models import Category, Staff, StaffCategory, SubCategory, Window
from walkin_queue.models.enums import StaffRole
from walkin_queue.utils.logger import logger

DEFAULT_CATEGORIES = {
    "Billing": ["Payment", "Refund", "Invoice"],
    "Enrollment": ["New Enrollment", "Re-enrollment", "Transfer"],
    "Records": ["Transcript", "Diploma", "Certificate"],
}
DEFAULT_WINDOWS = ["Window 1", "Window 2"]


def _build_categories() -> list[Category]:
    categories = []
    for name, sub_names in DEFAULT_CATEGORIES.items():
        category = Category(name=name)
        category.sub_categories = [SubCategory(name=sub) for sub in sub_names]
        categories.append(category)
    return categories


def _build_staff(categories: list[Category]) -> list[Staff]:
    """Build the default accounts. Change these passwords after first login."""
    by_name = {c.name: c for c in categories}
    staff1 = Staff(
        username="staff1",
        name="John Doe",
        role=StaffRole.STAFF,
        password_hash=get_password_hash("staff123"),
        active=True,
    )
    staff1.specializations = [
        StaffCategory(category=by_name["Billing"]),
        StaffCategory(category=by_name["Enrollment"]),
    ]
    return [
        Staff(
            username="admin",
            name="Administrator",
            role=StaffRole.ADMIN,
            password_hash=get_password_hash("admin123"),
            active=True,
        ),
        staff1,
    ]


def seed_if_empty(engine) -> None:
    """Seed the database with default data if it has not been seeded yet.

    Args:
        engine: SQLAlchemy engine instance. A session is created from this
                engine to perform all seed operations in a single transaction.
    """
    session = Session(bind=engine)
    try:
        staff_count = session.execute(text("SELECT COUNT(*) FROM staff")).scalar()
        if staff_count > 0:
            return

        categories = _build_categories()
        windows = [Window(label=label, is_active=True) for label in DEFAULT_WINDOWS]
        staff = _build_staff(categories)

        session.add_all(categories)
        session.add_all(windows)
        session.add_all(staff)
        session.commit()

        logger.info(
            f"Database seeded: {len(staff)} staff accounts, "
            f"{len(windows)} windows, "
            f"{len(categories)} categories"
        )
        logger.warning("Default credentials in use: admin/admin123, staff1/staff123")
    except Exception:
        session.rollback()
        logger.exception("Failed to seed database")
    finally:
        session.close()
