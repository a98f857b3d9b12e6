"""Enum types for database models."""

import enum


class StaffRole(str, enum.Enum):
    """Staff role enumeration."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"


class ClientType(str, enum.Enum):
    """Client type enumeration.

    Every type except REGULAR is a priority lane and is ordered ahead of
    REGULAR clients in the staff candidate queue.
    """

    REGULAR = "REGULAR"
    SENIOR_CITIZEN = "SENIOR_CITIZEN"
    PWD = "PWD"
    PREGNANT = "PREGNANT"

    @property
    def is_priority(self) -> bool:
        return self is not ClientType.REGULAR


class QueueStatus(str, enum.Enum):
    """Queue entry status enumeration."""

    WAITING = "WAITING"
    NOW_SERVING = "NOW_SERVING"
    SERVED = "SERVED"
    SKIPPED = "SKIPPED"


# Allowed status transitions. Nothing ever returns to WAITING and the
# SERVED/SKIPPED states are terminal. WAITING -> SERVED is a completion
# without a claim (no duration is recorded); NOW_SERVING -> SKIPPED is a
# called client who never came to the window.
QUEUE_TRANSITIONS = {
    QueueStatus.WAITING: frozenset(
        {QueueStatus.NOW_SERVING, QueueStatus.SERVED, QueueStatus.SKIPPED}
    ),
    QueueStatus.NOW_SERVING: frozenset({QueueStatus.SERVED, QueueStatus.SKIPPED}),
    QueueStatus.SERVED: frozenset(),
    QueueStatus.SKIPPED: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in QUEUE_TRANSITIONS.items() if not targets)
ACTIVE_STATUSES = frozenset({QueueStatus.WAITING, QueueStatus.NOW_SERVING})
