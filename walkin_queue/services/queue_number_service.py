"""Queue number generation backed by the per-day counter."""

import random
import time
from datetime import date, datetime
from typing import Callable, Optional

from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from walkin_queue.config import settings
from walkin_queue.core.exceptions import TransientStoreError
from walkin_queue.models import DailyCounter
from walkin_queue.utils.logger import logger
from walkin_queue.utils.office_time import office_today, utcnow

_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class QueueNumberService:
    """
    Issue queue numbers of the form ``MMDDYY-NNNN``.

    The date prefix and the counter partition both come from the office-local
    calendar date. The counter is incremented and read back in one statement
    (``INSERT .. ON CONFLICT DO UPDATE .. RETURNING``) so concurrent callers in
    any number of processes never observe the same value. Dialects without
    upsert support take a row lock through a plain ``UPDATE`` instead.

    Counters past 9999 keep widening (``012526-10000``); the format never wraps.
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        backoff_ms: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.max_attempts = max_attempts or settings.counter_retry_attempts
        self.backoff_ms = settings.counter_retry_backoff_ms if backoff_ms is None else backoff_ms
        self._sleep = sleep

    def issue_queue_number(self, db: Session, now: Optional[datetime] = None) -> str:
        """
        Generate the next queue number for the office-local day of ``now``.

        The counter update is committed before returning, so a number is
        consumed even if the caller fails afterwards.

        Args:
            db: Database session (committed by this call)
            now: Naive-UTC instant to issue for, defaults to the current time

        Returns:
            Queue number such as ``012526-0001``

        Raises:
            TransientStoreError: If the counter stayed conflicted past the retry budget
        """
        local_day = office_today(now)
        counter = self._next_counter(db, local_day.isoformat())
        queue_number = self.format_queue_number(local_day, counter)
        logger.info(f"Issued queue number {queue_number}")
        return queue_number

    @staticmethod
    def date_prefix(local_day: date) -> str:
        return local_day.strftime("%m%d%y")

    @classmethod
    def format_queue_number(cls, local_day: date, counter: int) -> str:
        return f"{cls.date_prefix(local_day)}-{counter:04d}"

    def current_counter(self, db: Session, local_day: Optional[date] = None) -> int:
        """Last counter value handed out for a day (0 if none yet)."""
        date_key = (local_day or office_today()).isoformat()
        row = db.query(DailyCounter).filter(DailyCounter.date_key == date_key).first()
        return row.counter if row else 0

    def reset_counter(self, db: Session, local_day: Optional[date] = None) -> int:
        """
        Delete counter rows (administrative reset).

        Args:
            db: Database session
            local_day: Only reset this day; all days when omitted

        Returns:
            Number of counter rows deleted
        """
        query = db.query(DailyCounter)
        if local_day is not None:
            query = query.filter(DailyCounter.date_key == local_day.isoformat())
        deleted = query.delete(synchronize_session=False)
        db.commit()
        logger.warning(f"Reset {deleted} daily counter row(s)")
        return deleted

    def _next_counter(self, db: Session, date_key: str) -> int:
        for attempt in range(1, self.max_attempts + 1):
            try:
                value = self._increment(db, date_key)
                db.commit()
                return value
            except (OperationalError, IntegrityError) as e:
                db.rollback()
                if attempt == self.max_attempts:
                    logger.error(
                        f"Daily counter {date_key} still conflicted after {attempt} attempts: {e}"
                    )
                    raise TransientStoreError(
                        "Could not issue a queue number, please try again"
                    ) from e
                delay = self._backoff_delay(attempt)
                logger.warning(
                    f"Daily counter {date_key} conflict on attempt {attempt}, retrying in {delay:.3f}s"
                )
                self._sleep(delay)
        raise AssertionError("unreachable")

    def _backoff_delay(self, attempt: int) -> float:
        base = self.backoff_ms / 1000.0 * (2 ** (attempt - 1))
        return base + random.uniform(0, base)

    def _increment(self, db: Session, date_key: str) -> int:
        dialect = db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            return self._increment_locked(db, date_key)

        table = DailyCounter.__table__
        now = utcnow()
        stmt = insert(table).values(
            date_key=date_key, counter=1, created_at=now, updated_at=now
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.date_key],
            set_={"counter": table.c.counter + 1, "updated_at": now},
        ).returning(table.c.counter)
        return db.execute(stmt).scalar_one()

    def _increment_locked(self, db: Session, date_key: str) -> int:
        # The UPDATE holds the row lock until commit, so the read below sees
        # our own increment and nobody else's.
        updated = (
            db.query(DailyCounter)
            .filter(DailyCounter.date_key == date_key)
            .update(
                {DailyCounter.counter: DailyCounter.counter + 1},
                synchronize_session=False,
            )
        )
        if updated == 0:
            # First number of the day. A concurrent creator trips the unique
            # constraint and the caller retries into the UPDATE branch.
            db.add(DailyCounter(date_key=date_key, counter=1))
            db.flush()
            return 1
        return (
            db.query(DailyCounter.counter)
            .filter(DailyCounter.date_key == date_key)
            .scalar()
        )


queue_number_service = QueueNumberService()
