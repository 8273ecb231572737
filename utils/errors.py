from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, Sequence, TypeVar

T = TypeVar("T")


class MadarsaError(Exception):
    """Base class for failures that map onto an API error envelope."""

    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MadarsaError):
    default_message = "Invalid input"


class InvalidPeriod(ValidationError):
    default_message = "Invalid month or year"


class NotFound(MadarsaError):
    status_code = 404
    default_message = "Not found"


class DuplicatePayment(MadarsaError):
    default_message = "Fee already paid for this month"


class ExternalFormatFailure(MadarsaError):
    default_message = "Invalid phone number"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success/failure variant returned at the fee status engine boundary.

    A successful result with empty data (no pending students, say) is
    distinct from a failed computation, so callers check ``success``
    instead of relying on exceptions.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[MadarsaError] = None

    @classmethod
    def ok(cls, data: Any = None) -> "Result":
        return cls(True, data, None)

    @classmethod
    def fail(cls, error: MadarsaError) -> "Result":
        return cls(False, None, error)

    def unwrap(self) -> T:
        if not self.success:
            raise self.error or MadarsaError()
        return self.data  # type: ignore[return-value]


def is_unique_violation(exc: Exception, constraint: str, columns: Sequence[str]) -> bool:
    """True when a DBAPI integrity error came from the named unique key.

    MySQL and PostgreSQL report the constraint name; SQLite only lists the
    ``table.column`` pairs, so those are matched as a fallback.
    """
    text = str(getattr(exc, "orig", exc))
    if constraint in text:
        return True
    return "UNIQUE constraint failed" in text and all(col in text for col in columns)
