# nexsched/errors.py


class NexSchedError(Exception):
    """Base class for errors raised by the scheduling core."""


class NotFoundError(NexSchedError):
    pass


class DuplicateSlugError(NexSchedError):
    pass


class AuthenticationError(NexSchedError):
    pass


class BackendError(NexSchedError):
    """The external auth/database backend rejected a call."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class BackendNotConfiguredError(BackendError):
    def __init__(self, message: str):
        super().__init__(message, code="NOT_CONFIGURED")


class BookingConflictError(NexSchedError):
    pass
