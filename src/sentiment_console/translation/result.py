"""Outcome types returned by a translator.

``translate()`` never raises for a per-request problem.  It returns a
``TranslationResult`` that carries either the validated value or a
``TranslationFailure`` describing why there is none.

Status strings
--------------
``success``                    value is set, failure is ``None``
``failure.api_error``          the completion service could not answer
``failure.validation_failed``  the answer never matched the schema
``failure.unexpected``         the translator raised something else; the
                               request loop builds this one itself
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

STATUS_SUCCESS = "success"
STATUS_API_ERROR = "failure.api_error"
STATUS_VALIDATION_FAILED = "failure.validation_failed"
STATUS_UNEXPECTED = "failure.unexpected"

T = TypeVar("T")


@dataclass(frozen=True)
class TranslationFailure:
    """Why a translation produced no value.

    Attributes:
        status:  One of the ``failure.*`` status strings above.
        message: Human-readable explanation, shown to the user as-is.
    """

    status: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class TranslationResult(Generic[T]):
    """Either a schema-conforming value or a failure, never both.

    Attributes:
        value:    The validated model instance on success.
        failure:  The failure description otherwise.
        attempts: Number of completion calls made (1 + repairs).
    """

    value: T | None = None
    failure: TranslationFailure | None = None
    attempts: int = 0

    def __post_init__(self) -> None:
        if (self.value is None) == (self.failure is None):
            raise ValueError("TranslationResult needs exactly one of value or failure")

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def status(self) -> str:
        return STATUS_SUCCESS if self.failure is None else self.failure.status

    @classmethod
    def success(cls, value: T, *, attempts: int = 1) -> TranslationResult[T]:
        return cls(value=value, attempts=attempts)

    @classmethod
    def fail(cls, status: str, message: str, *, attempts: int = 0) -> TranslationResult[T]:
        return cls(failure=TranslationFailure(status=status, message=message), attempts=attempts)
