"""Error taxonomy for queue operations.

Each error carries the HTTP status it is rendered with; ``main.py`` installs
a single handler for ``QueueError`` so services never import FastAPI.
"""

from typing import Optional


class QueueError(Exception):
    """Base class for classified queue errors."""

    status_code = 500
    default_message = "Queue operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(QueueError, ValueError):
    """Malformed or semantically invalid admission request."""

    status_code = 400
    default_message = "Invalid queue request"


class NotFound(QueueError, LookupError):
    status_code = 404
    default_message = "Queue entry not found"


class NoActiveWindow(QueueError):
    """Staff attempted a window operation without an active assignment."""

    status_code = 400
    default_message = "No active window assignment"


class ClaimConflict(QueueError):
    """Another window claimed the entry first, or it left WAITING."""

    status_code = 409
    default_message = "Client was already claimed by another window. Please refresh the queue."

    def __init__(self, queue_entry_id: Optional[int] = None, message: Optional[str] = None):
        self.queue_entry_id = queue_entry_id
        super().__init__(message)


class AlreadySkipped(QueueError):
    status_code = 400
    default_message = "Entry already skipped"


class InvalidTransition(QueueError):
    """The entry's current status does not allow the requested change."""

    status_code = 400
    default_message = "Queue entry can no longer be changed"


class TransientStoreError(QueueError):
    """The store stayed unavailable or conflicted past the retry budget."""

    status_code = 503
    default_message = "Queue store is busy, please try again"
