"""Result type for domain construction and validation.

Every smart constructor in :mod:`robot_post.domain` returns either
:class:`Ok` wrapping the validated value or :class:`Err` wrapping a
:class:`DomainError`.  Expected input problems (bad ranges, wrong arity,
unknown robots) never raise; only programming errors do.

Usage::

    result = Speed.create(100)
    if result.ok:
        speed = result.value
    else:
        print(result.error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterable, TypeVar, Union

T = TypeVar("T")


class ErrorKind(Enum):
    """Category of a domain failure."""

    FORMAT = "format"
    """Malformed text or numbers: bad version strings, wrong arity, NaN."""

    RANGE = "range"
    """Safety limits: speed, acceleration, joint 6 rotation."""

    STRUCTURAL = "structural"
    """Unsupported robot or movement type, missing payload, empty trajectory."""


@dataclass(frozen=True, slots=True)
class DomainError:
    """A specific, human-readable reason why input was rejected."""

    kind: ErrorKind
    message: str

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("DomainError requires a non-empty message")

    def with_prefix(self, prefix: str) -> DomainError:
        """Return a copy whose message starts with *prefix*."""
        return DomainError(self.kind, f"{prefix}{self.message}")

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying a validated value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    """Failed outcome carrying the first (or combined) domain error."""

    error: DomainError

    @property
    def ok(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    @property
    def message(self) -> str:
        return self.error.message

    def unwrap(self):
        """Raise ``ValueError``: unwrapping a failure is a caller bug."""
        raise ValueError(f"Called unwrap() on a failed result: {self.error.message}")


Result = Union[Ok[T], Err]


def fail(kind: ErrorKind, message: str) -> Err:
    """Shorthand for ``Err(DomainError(kind, message))``."""
    return Err(DomainError(kind, message))


def combine(results: Iterable[Result]) -> Result[None]:
    """Fold many results into one.

    Succeeds when every result succeeded.  Otherwise all failure messages
    are joined with newlines; the kind of the first failure is kept.
    """
    errors = [r.error for r in results if not r.ok]
    if not errors:
        return Ok(None)
    return Err(
        DomainError(errors[0].kind, "\n".join(e.message for e in errors))
    )
