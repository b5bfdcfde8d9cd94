"""Validator Rules

A ConstraintRule binds a field accessor to an ordered, non-empty tuple of
predicates plus group membership and an optional condition. A NestedRule
recurses into a sub-target, or into each element of a collection.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterator

from covenant.constraints import Predicate
from covenant.core.errors import empty_predicates, invalid_definition
from covenant.groups import ConstraintGroup

if TYPE_CHECKING:
    from covenant.validator import Validator

Accessor = Callable[[Any], Any]
Condition = Callable[[Any], bool]


class ValidationMode(str, Enum):
    """Per-field predicate accumulation strategy."""
    FAIL_FAST = "fail_fast"      # first failing predicate only
    COLLECT_ALL = "collect_all"  # every failing predicate


@dataclass(frozen=True, slots=True)
class ConstraintRule:
    name: str
    accessor: Accessor
    predicates: tuple[Predicate, ...]
    groups: frozenset[ConstraintGroup] = frozenset()
    condition: Condition | None = None
    mode: ValidationMode = ValidationMode.FAIL_FAST

    def __post_init__(self):
        if not self.name: raise invalid_definition("constraint name must not be empty")
        if not isinstance(self.predicates, tuple): object.__setattr__(self, "predicates", tuple(self.predicates))
        if not self.predicates: raise empty_predicates(self.name)

    def applies(self, target: Any, group: ConstraintGroup) -> bool:
        """Group matches (or the rule is unrestricted) and the condition holds."""
        if self.groups and group not in self.groups: return False
        return self.condition is None or bool(self.condition(target))

    def failures(self, value: Any) -> Iterator[Predicate]:
        """Failing predicates in declaration order, honoring the mode."""
        for pred in self.predicates:
            if not pred(value):
                yield pred
                if self.mode is ValidationMode.FAIL_FAST: return


@dataclass(frozen=True, slots=True)
class NestedRule:
    """Validate the value (or each element when iterable) with another validator.

    validator=None resolves the validator from the registry by the runtime
    type of the value (or of each element).
    """
    name: str
    accessor: Accessor
    validator: Validator | None = None
    iterable: bool = False
    groups: frozenset[ConstraintGroup] = frozenset()
    condition: Condition | None = None

    def __post_init__(self):
        if not self.name: raise invalid_definition("nested rule name must not be empty")

    def applies(self, target: Any, group: ConstraintGroup) -> bool:
        if self.groups and group not in self.groups: return False
        return self.condition is None or bool(self.condition(target))


Rule = ConstraintRule | NestedRule
