"""Custom exceptions for State Store."""


class StateStoreError(Exception):
    """Base exception for State Store errors."""


class NotFoundError(StateStoreError):
    """Referenced record does not exist."""


class UserNotFoundError(NotFoundError):
    """User with given ID does not exist."""


class CourseNotFoundError(NotFoundError):
    """Course with given ID does not exist."""


class EnrollmentNotFoundError(NotFoundError):
    """Enrollment with given ID does not exist."""


class UserExistsError(StateStoreError):
    """User with given email already exists."""


class ConcurrencyConflictError(StateStoreError):
    """Enrollment was modified by another writer since it was read.

    Callers should re-read the enrollment and retry the whole operation.
    """


class StoreFailureError(StateStoreError):
    """Underlying persistence operation failed."""
