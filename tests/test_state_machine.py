"""Tests for completion, skip and the status state machine."""

from datetime import timedelta

import pytest

from walkin_queue.core.exceptions import AlreadySkipped, InvalidTransition, NotFound, QueueError
from walkin_queue.models import QUEUE_TRANSITIONS, QueueEntry, QueueStatus, ServingLog
from walkin_queue.services.reconciler import reconcile_stale_serving
from walkin_queue.services.serving_service import serving_service

from conftest import MORNING, join


class TestTransitions:
    def test_nothing_returns_to_waiting(self):
        assert all(QueueStatus.WAITING not in targets for targets in QUEUE_TRANSITIONS.values())

    @pytest.mark.parametrize("status", [QueueStatus.SERVED, QueueStatus.SKIPPED])
    def test_terminal_statuses_have_no_exits(self, status):
        assert QUEUE_TRANSITIONS[status] == frozenset()

    def test_entry_helpers(self, test_db, billing):
        entry = join(test_db, "Ana", "PREGNANT", billing, now=MORNING)

        assert entry.is_priority
        assert not entry.is_terminal
        assert entry.can_transition_to(QueueStatus.NOW_SERVING)
        assert not entry.can_transition_to(QueueStatus.WAITING)


class TestComplete:
    def test_complete_records_duration_from_claim(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.claim_next(test_db, staff_one.id, entry.id, now=MORNING + timedelta(minutes=5))

        log = serving_service.complete_serving(
            test_db, staff_one.id, entry.id, now=MORNING + timedelta(minutes=9)
        )

        assert log.duration == 240
        assert log.staff_id == staff_one.id
        assert log.category_id == billing.id
        test_db.expire_all()
        completed = test_db.get(QueueEntry, entry.id)
        assert completed.status == QueueStatus.SERVED
        assert completed.served_at == MORNING + timedelta(minutes=9)

    def test_complete_without_claim_has_no_duration(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)

        log = serving_service.complete_serving(test_db, staff_one.id, entry.id, now=MORNING)

        assert log.duration is None
        test_db.expire_all()
        assert test_db.get(QueueEntry, entry.id).status == QueueStatus.SERVED

    def test_duration_is_never_negative(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.claim_next(test_db, staff_one.id, entry.id, now=MORNING)

        log = serving_service.complete_serving(
            test_db, staff_one.id, entry.id, now=MORNING - timedelta(seconds=30)
        )

        assert log.duration == 0

    def test_complete_twice_is_rejected(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.complete_serving(test_db, staff_one.id, entry.id)

        with pytest.raises(InvalidTransition):
            serving_service.complete_serving(test_db, staff_one.id, entry.id)

        assert test_db.query(ServingLog).count() == 1

    def test_complete_unknown_entry(self, test_db, staff_one):
        with pytest.raises(NotFound):
            serving_service.complete_serving(test_db, staff_one.id, 404)


class TestSkip:
    def test_skip_waiting_entry(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)

        skipped = serving_service.skip(test_db, entry.id, staff_one.id)

        assert skipped.status == QueueStatus.SKIPPED
        assert skipped.skipped_by_staff_id == staff_one.id

    def test_skip_called_client_who_never_came(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.claim_next(test_db, staff_one.id, entry.id)

        assert serving_service.skip(test_db, entry.id, staff_one.id).status == QueueStatus.SKIPPED

    def test_skip_twice(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.skip(test_db, entry.id, staff_one.id)

        with pytest.raises(AlreadySkipped) as exc_info:
            serving_service.skip(test_db, entry.id, staff_one.id)

        assert exc_info.value.message == "Entry already skipped"

    def test_served_entry_cannot_be_skipped(self, test_db, billing, staff_one):
        entry = join(test_db, "Ana", "REGULAR", billing, now=MORNING)
        serving_service.complete_serving(test_db, staff_one.id, entry.id)

        with pytest.raises(InvalidTransition):
            serving_service.skip(test_db, entry.id, staff_one.id)

        test_db.expire_all()
        assert test_db.get(QueueEntry, entry.id).status == QueueStatus.SERVED


class TestNoResurrection:
    def test_terminal_entries_survive_every_operation(self, test_db, billing, staff_one):
        served = join(test_db, "Ana", "REGULAR", billing, now=MORNING - timedelta(days=1))
        skipped = join(test_db, "Ben", "REGULAR", billing, now=MORNING - timedelta(days=1))
        serving_service.complete_serving(test_db, staff_one.id, served.id)
        serving_service.skip(test_db, skipped.id, staff_one.id)

        for entry_id in (served.id, skipped.id):
            for operation in (
                lambda: serving_service.claim_next(test_db, staff_one.id, entry_id),
                lambda: serving_service.complete_serving(test_db, staff_one.id, entry_id),
                lambda: serving_service.skip(test_db, entry_id, staff_one.id),
            ):
                with pytest.raises(QueueError):
                    operation()
        reconcile_stale_serving(test_db, now=MORNING)

        test_db.expire_all()
        assert test_db.get(QueueEntry, served.id).status == QueueStatus.SERVED
        assert test_db.get(QueueEntry, skipped.id).status == QueueStatus.SKIPPED
        assert test_db.query(ServingLog).count() == 1
