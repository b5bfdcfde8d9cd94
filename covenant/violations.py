"""Constraint Violations

Structured, immutable records of failed predicates. A validation call
returns them in rule declaration order; nested locations use dotted and
indexed paths ("address.city", "items[0].name").

Serialized Format:
{
    "error": {
        "type": "validation_error",
        "message": "Validation failed",
        "error_count": 1,
        "errors": [
            {
                "field": "email",
                "constraint": "charSequence.email",
                "value": "invalid-email",
                "message": "\"email\" must be a valid email address"
            }
        ]
    }
}
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Iterator, overload

from covenant.core.errors import AppError, ErrorCode

REDACTED = "[REDACTED]"


@dataclass(frozen=True, slots=True)
class ConstraintViolation:
    """One failed predicate on one field.

    - name: field path (e.g. "user.addresses[0].street")
    - message_key: key of the predicate that failed (e.g. "container.lessThan")
    - message: message rendered for the requested locale
    - args: message arguments; args[0] is the field path
    - value: the value that failed
    """
    name: str
    message_key: str
    message: str
    args: tuple = ()
    value: Any = None

    def redact_if_sensitive(self, sensitive_fields: frozenset[str] | set[str] | None = None) -> ConstraintViolation:
        """Redact the value if any path segment is a sensitive field."""
        if not sensitive_fields: return self
        path_parts = self.name.replace("[", ".").replace("]", "").split(".")
        if any(part in sensitive_fields for part in path_parts):
            return ConstraintViolation(name=self.name, message_key=self.message_key, message=self.message,
                args=self.args, value=REDACTED)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        result = {"field": self.name, "constraint": self.message_key, "message": self.message}
        if self.value is not None: result["value"] = self.value
        return result


class ConstraintViolations(Sequence[ConstraintViolation]):
    """Ordered, immutable violations of one validation call; empty means valid."""

    __slots__ = ("_violations",)

    def __init__(self, violations: Sequence[ConstraintViolation] | None = None):
        self._violations: tuple[ConstraintViolation, ...] = tuple(violations or ())

    @overload
    def __getitem__(self, index: int) -> ConstraintViolation: ...

    @overload
    def __getitem__(self, index: slice) -> ConstraintViolations: ...

    def __getitem__(self, index):
        if isinstance(index, slice): return ConstraintViolations(self._violations[index])
        return self._violations[index]

    def __len__(self) -> int: return len(self._violations)

    def __iter__(self) -> Iterator[ConstraintViolation]: return iter(self._violations)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConstraintViolations): return self._violations == other._violations
        if isinstance(other, (list, tuple)): return list(self._violations) == list(other)
        return NotImplemented

    def __hash__(self) -> int: return hash(self._violations)

    def __repr__(self) -> str: return f"ConstraintViolations({list(self._violations)!r})"

    def is_valid(self) -> bool:
        return not self._violations

    @property
    def first(self) -> ConstraintViolation | None: return self._violations[0] if self._violations else None

    @property
    def field_errors(self) -> dict[str, list[ConstraintViolation]]:
        """Group violations by field path, preserving order."""
        result: dict[str, list[ConstraintViolation]] = {}
        for v in self._violations: result.setdefault(v.name, []).append(v)
        return result

    def get_violations_for(self, name: str) -> list[ConstraintViolation]:
        return [v for v in self._violations if v.name == name]

    def messages(self) -> list[str]:
        return [v.message for v in self._violations]

    def details(self, sensitive_fields: frozenset[str] | set[str] | None = None) -> list[dict[str, Any]]:
        return [v.redact_if_sensitive(sensitive_fields).to_dict() for v in self._violations]

    def to_dict(self, *, message: str = "Validation failed",
                sensitive_fields: frozenset[str] | set[str] | None = None) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        details = self.details(sensitive_fields)
        return {"error": {"type": "validation_error", "message": message, "error_count": len(details),
            "errors": details}}

    def to_app_error(self, sensitive_fields: frozenset[str] | set[str] | None = None) -> AppError:
        """Convert to AppError for error-boundary code."""
        details = self.details(sensitive_fields)
        if len(details) == 1:
            d = details[0]
            return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"{d['field']}: {d['message']}",
                metadata={"field": d["field"], "constraint": d["constraint"], "value": d.get("value")})
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"Validation failed: {len(details)} errors",
            metadata={"error_count": len(details), "errors": details})

    def throw_if_invalid(self, message: str = "Validation failed") -> None:
        """Raise ConstraintViolationsError when any violation exists."""
        if self._violations: raise ConstraintViolationsError(message=message, violations=self)


@dataclass
class ConstraintViolationsError(Exception):
    """Raised on request (throw_if_invalid) for callers that prefer exceptions.

    The engine itself never raises for data violations.
    """
    message: str
    violations: ConstraintViolations = field(default_factory=ConstraintViolations)

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.violations: return self.message
        if len(self.violations) == 1: return f"{(v := self.violations[0]).name}: {v.message}"
        return f"{self.message} ({len(self.violations)} errors)"

    def to_app_error(self) -> AppError:
        return self.violations.to_app_error()
