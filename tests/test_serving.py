"""Tests for the staff candidate view and the exactly-once claim."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from walkin_queue.core.exceptions import ClaimConflict, NoActiveWindow, NotFound
from walkin_queue.models import QueueEntry, QueueStatus
from walkin_queue.services.serving_service import serving_service
from walkin_queue.services.window_service import window_service

from conftest import MORNING, join, make_category, make_staff, make_window


class TestCandidates:
    def test_priority_clients_come_first_then_fifo(self, test_db, billing, staff_one):
        regular_1 = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        senior = join(test_db, "Ben", "SENIOR_CITIZEN", billing, now=MORNING + timedelta(minutes=1))
        regular_2 = join(test_db, "Cara", "REGULAR", billing, now=MORNING + timedelta(minutes=2))
        pwd = join(test_db, "Dan", "PWD", billing, now=MORNING + timedelta(minutes=3))

        candidates = serving_service.get_candidates(test_db, staff_one.id, now=MORNING)

        assert [e.id for e in candidates] == [senior.id, pwd.id, regular_1.id, regular_2.id]

    def test_own_window_entries_come_before_the_pool(self, test_db, billing, staff_one):
        waiting = join(test_db, "Ana", "SENIOR_CITIZEN", billing, now=MORNING)
        claimed = join(test_db, "Ben", "REGULAR", billing, now=MORNING + timedelta(minutes=1))
        serving_service.claim_next(test_db, staff_one.id, claimed.id, now=MORNING)

        candidates = serving_service.get_candidates(test_db, staff_one.id, now=MORNING)

        assert [e.id for e in candidates] == [claimed.id, waiting.id]

    def test_entries_claimed_by_other_windows_are_hidden(self, test_db, billing, staff_one, staff_two):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.claim_next(test_db, staff_two.id, entry.id, now=MORNING)

        assert serving_service.get_candidates(test_db, staff_one.id, now=MORNING) == []

    def test_specializations_filter_the_pool(self, test_db, billing, records, window_one):
        specialist = make_staff(test_db, "carol", window=window_one, category_ids=[records.id])
        join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        transcript = join(test_db, "Ben", "REGULAR", records, now=MORNING)

        candidates = serving_service.get_candidates(test_db, specialist.id, now=MORNING)

        assert [e.id for e in candidates] == [transcript.id]

    def test_yesterdays_entries_are_not_candidates(self, test_db, billing, staff_one):
        join(test_db, "Ana", "REGULAR", billing, now=MORNING - timedelta(days=1))

        assert serving_service.get_candidates(test_db, staff_one.id, now=MORNING) == []

    def test_no_window_means_no_candidates(self, test_db, billing):
        staff = make_staff(test_db, "dave")
        join(test_db, "Ana", "REGULAR", billing, now=MORNING)

        assert serving_service.get_candidates(test_db, staff.id, now=MORNING) == []


class TestClaim:
    def test_claim_binds_entry_to_window(self, test_db, billing, staff_one, window_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)

        claimed = serving_service.claim_next(test_db, staff_one.id, entry.id, now=MORNING)

        assert claimed.status == QueueStatus.NOW_SERVING
        assert claimed.window_id == window_one.id
        assert claimed.updated_at == MORNING

    def test_claim_requires_an_active_window(self, test_db, billing):
        staff = make_staff(test_db, "dave")
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)

        with pytest.raises(NoActiveWindow):
            serving_service.claim_next(test_db, staff.id, entry.id)

    def test_released_window_cannot_claim(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        window_service.assign_window(test_db, staff_one.id, None)

        with pytest.raises(NoActiveWindow):
            serving_service.claim_next(test_db, staff_one.id, entry.id)

    def test_unknown_entry(self, test_db, staff_one):
        assert serving_service.get(test_db, 999) is None
        with pytest.raises(NotFound) as exc_info:
            serving_service.claim_next(test_db, staff_one.id, 999)

        assert exc_info.value.message == "Queue entry not found"

    def test_second_claim_conflicts(self, test_db, billing, staff_one, staff_two, window_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.claim_next(test_db, staff_one.id, entry.id)

        with pytest.raises(ClaimConflict) as exc_info:
            serving_service.claim_next(test_db, staff_two.id, entry.id)

        assert exc_info.value.status_code == 409
        test_db.expire_all()
        assert test_db.get(QueueEntry, entry.id).window_id == window_one.id

    def test_terminal_entries_cannot_be_claimed(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.skip(test_db, entry.id, staff_one.id)

        with pytest.raises(ClaimConflict):
            serving_service.claim_next(test_db, staff_one.id, entry.id)

        test_db.expire_all()
        assert test_db.get(QueueEntry, entry.id).status == QueueStatus.SKIPPED


class TestConcurrentClaim:
    def test_exactly_one_window_wins(self, file_session_factory):
        windows = 8
        setup = file_session_factory()
        try:
            category = make_category(setup)
            staff_ids = []
            window_ids = {}
            for i in range(windows):
                window = make_window(setup, f"Window {i + 1}")
                staff = make_staff(setup, f"staff{i}", window=window)
                staff_ids.append(staff.id)
                window_ids[staff.id] = window.id
            entry_id = join(setup, "Ana", "REGULAR", category).id
        finally:
            setup.close()

        barrier = threading.Barrier(windows)

        def claim(staff_id):
            db = file_session_factory()
            try:
                barrier.wait()
                serving_service.claim_next(db, staff_id, entry_id)
                return staff_id
            except ClaimConflict:
                return None
            finally:
                db.close()

        with ThreadPoolExecutor(max_workers=windows) as pool:
            results = list(pool.map(claim, staff_ids))

        winners = [r for r in results if r is not None]
        assert len(winners) == 1

        check = file_session_factory()
        try:
            entry = check.get(QueueEntry, entry_id)
            assert entry.status == QueueStatus.NOW_SERVING
            assert entry.window_id == window_ids[winners[0]]
        finally:
            check.close()
