"""Domain error taxonomy.

Every failure of the booking core is raised as a ``StaybookError`` subclass
carrying an ``ErrorKind`` and a human-readable message. The HTTP layer maps
kinds to status codes in ``staybook.api.errors``.
"""

import enum


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    CONFLICT = "conflict"
    INVALID_INPUT = "invalid_input"
    FORBIDDEN = "forbidden"


class StaybookError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(StaybookError):
    """Referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND

    @classmethod
    def for_entity(cls, entity: str, entity_id: object) -> "NotFoundError":
        return cls(f"{entity} not found: {entity_id}")


class InvalidStateError(StaybookError):
    """Operation not permitted given the entity's current status."""

    kind = ErrorKind.INVALID_STATE


class ConflictError(StaybookError):
    """Business or concurrency conflict distinct from status.

    ``retryable`` is True when the conflict came from a concurrent writer
    (stale version, constraint race); the caller should re-run the whole
    operation.
    """

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        self.retryable = retryable
        super().__init__(message)


class InvalidInputError(StaybookError):
    """Caller-supplied value fails a domain rule."""

    kind = ErrorKind.INVALID_INPUT


class ForbiddenError(StaybookError):
    """Raised by the authorization gate when a predicate is false."""

    kind = ErrorKind.FORBIDDEN
