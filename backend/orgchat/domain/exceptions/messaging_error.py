"""
MessagingError - Root of every failure raised inside the messaging subsystem.

None of these are fatal: callers contain them and degrade (empty list, rollback,
detached channel) instead of letting them reach the UI shell.
"""


class MessagingError(Exception):
    """Base class for contained messaging failures."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
