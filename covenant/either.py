"""Either-style validation: Ok(target) or Err(violations)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from covenant.core.errors import Err, Ok, Result
from covenant.groups import ConstraintGroup
from covenant.violations import ConstraintViolations

if TYPE_CHECKING:
    from covenant.validator import Validator

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class EitherValidator(Generic[T]):
    validator: Validator

    def validate(self, target: T, locale: str | None = None,
                 group: ConstraintGroup | Any = ConstraintGroup.DEFAULT) -> Result[T, ConstraintViolations]:
        """Ok holds the very target object passed in; a None target raises."""
        violations = self.validator.validate(target, locale, group)
        return Ok(target) if violations.is_valid() else Err(violations)
