"""
Result values — railway-oriented error handling for the listing pipeline.

A Result[T] is either Success(value) or Failure(FailureDescription).
Adapters convert exceptions into failures at their boundary, so the
pipeline only composes values:

    scan(directory) ──Success──> project each file ──Success──> render
          │ Failure                      │ Failure (per file)        │ Failure
          └──> HTTP 500                  └──> skipped + logged       └──> HTTP 500

Per-file failures are either collected next to the successes (lenient)
or short-circuit through Result.all_of (strict, first failure wins).
"""

from __future__ import annotations

import traceback
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


@unique
class ErrorCode(Enum):
    """
    Error taxonomy of the certificate listing.

    Request-fatal: DIRECTORY_UNREADABLE, RENDERING_FAILURE.
    Per-file (skipped under the lenient policy): FILE_UNREADABLE,
    MALFORMED_PEM, INVALID_CERTIFICATE, NON_TEXT_PATH.
    """

    DIRECTORY_UNREADABLE = "DIRECTORY_UNREADABLE"
    """Certificate directory missing or not listable."""

    FILE_UNREADABLE = "FILE_UNREADABLE"
    """A file vanished or could not be read mid-scan."""

    MALFORMED_PEM = "MALFORMED_PEM"
    """No CERTIFICATE block, or corrupted base64."""

    INVALID_CERTIFICATE = "INVALID_CERTIFICATE"
    """PEM body is not a decodable X.509 certificate."""

    NON_TEXT_PATH = "NON_TEXT_PATH"
    """File path cannot be represented as UTF-8 text."""

    RENDERING_FAILURE = "RENDERING_FAILURE"
    """Template missing or failed to render."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor: error code, message, optional exception, timestamp.

    >>> desc = FailureDescription(ErrorCode.MALFORMED_PEM, "No PEM block")
    >>> desc.cause
    'No PEM block'
    """

    code: ErrorCode
    message: str
    exception: BaseException | None = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def cause(self) -> str:
        """Message plus the underlying exception text, if any."""
        if self.exception is None:
            return self.message
        return f"{self.message}: {self.exception}"

    def full_stack_trace(self) -> str:
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(
                type(self.exception), self.exception, self.exception.__traceback__
            )
        )
        return f"{self.message}\n{tb}"


class Result(Generic[T]):
    """
    Either Success(value) or Failure(error).

    Transformations short-circuit on failure:

        >>> Result.success(21).map(lambda x: x * 2).value()
        42
        >>> Result.failure(ErrorCode.MALFORMED_PEM, "bad").map(str).is_failure()
        True
    """

    # ──────────────────────── Introspection ────────────────────────

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def value(self) -> T:
        """Extract the success value. Raises ValueError on a Failure."""
        match self:
            case Success(v):
                return v
            case Failure(err):
                raise ValueError(f"Cannot get value from a Failure: {err.message}")
        raise TypeError("unreachable")  # pragma: no cover

    def error(self) -> FailureDescription:
        """Extract the failure description. Raises ValueError on a Success."""
        match self:
            case Failure(err):
                return err
            case Success(v):
                raise ValueError(f"Cannot get error from a Success: {v!r}")
        raise TypeError("unreachable")  # pragma: no cover

    # ──────────────────────── Transformations ────────────────────────

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        """Apply one of two functions depending on the state."""
        match self:
            case Success(v):
                return on_success(v)
            case Failure(err):
                return on_failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        match self:
            case Success(v):
                return Success(mapper(v))
            case Failure(err):
                return Failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        """Chain a Result-returning function. Short-circuits on failure."""
        match self:
            case Success(v):
                return mapper(v)
            case Failure(err):
                return Failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        match self:
            case Success(v):
                action(v)
        return self

    def peek_failure(self, action: Callable[[FailureDescription], Any]) -> Result[T]:
        match self:
            case Failure(err):
                action(err)
        return self

    def get_or_else(self, default: T) -> T:
        match self:
            case Success(v):
                return v
            case _:
                return default

    # ──────────────────────── Factories ────────────────────────

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure(
        code: ErrorCode,
        message: str,
        exception: BaseException | None = None,
    ) -> Result[T]:
        """
        Create a failed Result.

            Result.failure(ErrorCode.NON_TEXT_PATH, "Path is not valid UTF-8")
        """
        return Failure(FailureDescription(code=code, message=message, exception=exception))

    @staticmethod
    def from_computation(
        computation: Callable[[], T],
        error_code: ErrorCode,
        error_message: str,
    ) -> Result[T]:
        """
        Run a computation that may raise and capture any exception as a failure.

            return Result.from_computation(
                lambda: path.read_bytes(),
                ErrorCode.FILE_UNREADABLE,
                f"Failed to read {path}",
            )
        """
        try:
            return Result.success(computation())
        except Exception as e:
            return Result.failure(error_code, error_message, e)

    # ──────────────────────── Collections ────────────────────────

    @staticmethod
    def all_of(results: Iterable[Result[T]]) -> Result[list[T]]:
        """Collect Results into a Result of list. The first failure wins."""
        values: list[T] = []
        for r in results:
            match r:
                case Success(v):
                    values.append(v)
                case Failure(err):
                    return Failure(err)
        return Success(values)

    # ──────────────────────── Dunder methods ────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        match (self, other):
            case (Success(a), Success(b)):
                return a == b
            case (Failure(a), Failure(b)):
                return a.code == b.code and a.message == b.message
            case _:
                return False

    __hash__ = None  # type: ignore[assignment]


class Success(Result[T]):
    """The happy track."""

    __match_args__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


class Failure(Result[T]):
    """The failure track."""

    __match_args__ = ("_error",)

    def __init__(self, error: FailureDescription) -> None:
        self._error = error

    def __repr__(self) -> str:
        return f"Failure({self._error.code.value}: {self._error.message!r})"
