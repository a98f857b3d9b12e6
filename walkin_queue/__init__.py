"""Walk-in queue service: daily queue numbers and exactly-once window claims."""

__version__ = "1.0.0"
