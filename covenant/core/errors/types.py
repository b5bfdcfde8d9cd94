"""Result Types and Error Values

Ok / Err model two-sided outcomes: the either entry point of a validator
returns Ok(target) or Err(violations). Both variants destructure in match
statements, so branching on an outcome is exhaustive.

AppError is the error value carried across error boundaries: a typed code,
a message, structured metadata and a tracing context.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, Iterator, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


class ErrorCode(Enum):
    """Error code taxonomy.

    E20xx: data violations (collected, never raised by the engine)
    E203x: contract violations (misuse of the API, always raised)
    E9xxx: internal
    """
    E2000_VALIDATION_GENERIC = 2000

    E2030_NULL_TARGET = 2030
    E2031_EMPTY_PREDICATES = 2031
    E2032_NESTING_TOO_DEEP = 2032
    E2033_INVALID_DEFINITION = 2033

    E9003_ASSERTION_FAILED = 9003

    @property
    def is_contract_violation(self) -> bool:
        return 2030 <= self.value < 2100 or self.value >= 9000

    @property
    def category(self) -> str:
        if self.value < 2030: return "validation"
        return "contract" if self.value < 2100 else "internal"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    correlation_id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""  # validator or component that produced the error


@dataclass(frozen=True, slots=True)
class AppError:
    """Typed error value; exceptions wrap it via AppErrorException."""
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"error": {"code": self.code.name, "code_num": self.code.value, "message": self.message,
            "category": self.code.category, "origin": self.context.origin,
            "correlation_id": self.context.correlation_id, "metadata": self.metadata}}

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


# ============================================================================
# Result
# ============================================================================

@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success side; for validation the value is the target itself."""
    value: T

    def is_ok(self) -> bool: return True

    def is_err(self) -> bool: return False

    def unwrap(self) -> T: return self.value

    def unwrap_err(self) -> NoReturn: raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")

    def unwrap_or(self, default: T) -> T: return self.value

    def unwrap_or_else(self, f: Callable[[Any], T]) -> T: return self.value

    def expect(self, msg: str) -> T: return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, Any]: return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], F]) -> Result[T, F]: return self

    def and_then(self, f: Callable[[T], Result[U, Any]]) -> Result[U, Any]: return f(self.value)

    def or_else(self, f: Callable[[Any], Result[T, F]]) -> Result[T, F]: return self

    def match(self, ok: Callable[[T], U], err: Callable[[Any], U]) -> U:
        """Fold both sides into one value."""
        return ok(self.value)

    def __iter__(self) -> Iterator[T]: yield self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure side: an AppError, or ConstraintViolations from a validator."""
    error: E

    def is_ok(self) -> bool: return False

    def is_err(self) -> bool: return True

    def unwrap(self) -> NoReturn: raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_err(self) -> E: return self.error

    def unwrap_or(self, default: T) -> T: return default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T: return f(self.error)

    def expect(self, msg: str) -> NoReturn: raise ValueError(f"{msg}: {self.error}")

    def map(self, f: Callable[[Any], U]) -> Result[U, E]: return self

    def map_err(self, f: Callable[[E], F]) -> Result[Any, F]: return Err(f(self.error))

    def and_then(self, f: Callable[[Any], Result[U, E]]) -> Result[U, E]: return self

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]: return f(self.error)

    def match(self, ok: Callable[[Any], U], err: Callable[[E], U]) -> U: return err(self.error)

    def __iter__(self) -> Iterator: return iter(())


Result = Union[Ok[T], Err[E]]


def ok(value: T) -> Ok[T]: return Ok(value)


def err(error: E) -> Err[E]: return Err(error)


def collect_results(results: list[Result[T, E]]) -> Result[list[T], list[E]]:
    """Ok of all values, or Err of every error."""
    values: list[T] = []
    errors: list[E] = []
    for r in results:
        match r:
            case Ok(v): values.append(v)
            case Err(e): errors.append(e)
    return Err(errors) if errors else Ok(values)


def sequence_results(results: list[Result[T, E]]) -> Result[list[T], E]:
    """Ok of all values, or the first Err."""
    values: list[T] = []
    for r in results:
        match r:
            case Ok(v): values.append(v)
            case Err(e): return Err(e)
    return Ok(values)
