"""Per-day counter backing queue number generation."""

from sqlalchemy import Column, Integer, String, UniqueConstraint, CheckConstraint
from walkin_queue.models.base import BaseModel


class DailyCounter(BaseModel):
    """Track the daily sequence used for queue numbers.

    One row per office-local calendar date. The unique constraint on
    ``date_key`` is what the generator's upsert conflicts on, so it must not
    be dropped.
    """

    __tablename__ = "daily_counters"

    date_key = Column(String(10), nullable=False)  # YYYY-MM-DD, office-local
    counter = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("date_key", name="uq_daily_counter_date_key"),
        CheckConstraint("counter >= 0", name="ck_daily_counter_non_negative"),
    )

    def __repr__(self):
        return f"<DailyCounter(date_key={self.date_key}, counter={self.counter})>"
