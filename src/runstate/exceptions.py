"""
Custom exceptions for runstate.
"""


class RunStateError(Exception):
    """Base exception for runstate errors."""

    pass


class UnknownStatusError(RunStateError, ValueError):
    """Raised when a status value is not one of the recognised statuses."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Unknown test status {value!r}, expected one of: passed, failed, skipped, unknown"
        )


class EventLogError(RunStateError):
    """Raised when an event log cannot be read or is malformed."""

    def __init__(self, source: str, error_message: str):
        self.source = source
        self.error_message = error_message
        super().__init__(f"Invalid event log '{source}': {error_message}")
