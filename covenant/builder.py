"""Validator Builder

Collects field-rule declarations and produces an immutable Validator.

Usage:
    validator = (
        Validator.builder()
        .constraint_str("name", lambda u: u.name, lambda c: c.not_blank().less_than_or_equal(20))
        .constraint_number("age", lambda u: u.age, lambda c: c.between(0, 150))
        .nest("address", lambda u: u.address, address_validator)
        .for_each("tags", lambda u: u.tags, tag_validator)
        .build()
    )

Rules are evaluated in declaration order. Settings not given on the
builder (strict accessors, max depth) come from covenant.core.config.
"""
from __future__ import annotations

from dataclasses import replace
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Iterable

from covenant.constraints import (
    CharSequenceConstraint,
    CollectionConstraint,
    NumericConstraint,
    ObjectConstraint,
    Predicate,
)
from covenant.core.config import get_settings
from covenant.core.errors import invalid_definition
from covenant.groups import ConstraintGroup
from covenant.messages import MessageFormatter, MessageSource
from covenant.rules import Accessor, Condition, ConstraintRule, NestedRule, Rule, ValidationMode
from covenant.validator import Validator, ValidatorRegistry

GroupLike = ConstraintGroup | Enum | str
ConstraintLike = ObjectConstraint | Callable[[Any], ObjectConstraint] | Iterable[Predicate]


def _accessor(accessor: Accessor | str) -> Accessor:
    """Callables pass through; a dotted attribute path becomes an attrgetter."""
    if isinstance(accessor, str): return attrgetter(accessor)
    if not callable(accessor): raise invalid_definition(f"accessor must be callable, got {type(accessor).__name__}")
    return accessor


def _groups(groups: Iterable[GroupLike] | GroupLike) -> frozenset[ConstraintGroup]:
    if isinstance(groups, (ConstraintGroup, Enum, str)): groups = (groups,)
    return frozenset(ConstraintGroup.of(g) for g in groups)


def _predicates(constraint: ConstraintLike, kind: type[ObjectConstraint]) -> tuple[Predicate, ...]:
    if isinstance(constraint, ObjectConstraint): return constraint.predicates
    if isinstance(constraint, Predicate): return (constraint,)
    if callable(constraint):
        if not isinstance(built := constraint(kind()), ObjectConstraint):
            raise invalid_definition(f"constraint function must return a constraint, got {type(built).__name__}")
        return built.predicates
    predicates = tuple(constraint)
    if not all(isinstance(p, Predicate) for p in predicates):
        raise invalid_definition("constraint must be a constraint builder, a function, or predicates")
    return predicates


class ValidatorBuilder:
    """Mutable, chainable collector; build() returns the immutable Validator."""

    def __init__(self):
        self._rules: list[tuple[Rule, bool]] = []  # (rule, mode given explicitly)
        self._default_mode = ValidationMode.FAIL_FAST
        self._source: MessageSource | None = None
        self._registry: ValidatorRegistry | None = None
        self._strict: bool | None = None
        self._max_depth: int | None = None
        self._name = ""

    # =========================================================================
    # Field Rules
    # =========================================================================

    def constraint(
        self,
        name: str,
        accessor: Accessor | str,
        constraint: ConstraintLike,
        *,
        kind: type[ObjectConstraint] = ObjectConstraint,
        groups: Iterable[GroupLike] | GroupLike = (),
        condition: Condition | None = None,
        mode: ValidationMode | None = None,
    ) -> ValidatorBuilder:
        """Declare predicates for one field.

        constraint is a built constraint, a function receiving a fresh
        `kind()` and returning the configured constraint, or an iterable of
        Predicate objects.
        """
        rule = ConstraintRule(name=name, accessor=_accessor(accessor), predicates=_predicates(constraint, kind),
            groups=_groups(groups), condition=condition, mode=mode or ValidationMode.FAIL_FAST)
        self._rules.append((rule, mode is not None))
        return self

    def constraint_str(self, name: str, accessor: Accessor | str, constraint: ConstraintLike,
                       **options: Any) -> ValidatorBuilder:
        return self.constraint(name, accessor, constraint, kind=CharSequenceConstraint, **options)

    def constraint_number(self, name: str, accessor: Accessor | str, constraint: ConstraintLike,
                          **options: Any) -> ValidatorBuilder:
        return self.constraint(name, accessor, constraint, kind=NumericConstraint, **options)

    def constraint_collection(self, name: str, accessor: Accessor | str, constraint: ConstraintLike,
                              **options: Any) -> ValidatorBuilder:
        return self.constraint(name, accessor, constraint, kind=CollectionConstraint, **options)

    def constraint_object(self, name: str, accessor: Accessor | str, constraint: ConstraintLike,
                          **options: Any) -> ValidatorBuilder:
        return self.constraint(name, accessor, constraint, kind=ObjectConstraint, **options)

    def constraint_on_group(self, group: GroupLike | Iterable[GroupLike], name: str, accessor: Accessor | str,
                            constraint: ConstraintLike, **options: Any) -> ValidatorBuilder:
        return self.constraint(name, accessor, constraint, groups=group, **options)

    def constraint_on_condition(self, condition: Condition, name: str, accessor: Accessor | str,
                                constraint: ConstraintLike, **options: Any) -> ValidatorBuilder:
        return self.constraint(name, accessor, constraint, condition=condition, **options)

    # =========================================================================
    # Nested Rules
    # =========================================================================

    def nest(self, name: str, accessor: Accessor | str, validator: Validator | None = None, *,
             groups: Iterable[GroupLike] | GroupLike = (), condition: Condition | None = None) -> ValidatorBuilder:
        """Validate a sub-object; None resolves the validator from the registry."""
        return self._nested(name, accessor, validator, False, groups, condition)

    def for_each(self, name: str, accessor: Accessor | str, validator: Validator | None = None, *,
                 groups: Iterable[GroupLike] | GroupLike = (),
                 condition: Condition | None = None) -> ValidatorBuilder:
        """Validate every element of a collection (values of a mapping)."""
        return self._nested(name, accessor, validator, True, groups, condition)

    def _nested(self, name: str, accessor: Accessor | str, validator: Validator | None, iterable: bool,
                groups: Iterable[GroupLike] | GroupLike, condition: Condition | None) -> ValidatorBuilder:
        if validator is not None and not isinstance(validator, Validator):
            raise invalid_definition(f"'{name}' nested validator must be a Validator", field=name)
        self._rules.append((NestedRule(name=name, accessor=_accessor(accessor), validator=validator,
            iterable=iterable, groups=_groups(groups), condition=condition), True))
        return self

    def add_rule(self, rule: Rule) -> ValidatorBuilder:
        """Append a prebuilt ConstraintRule or NestedRule as-is."""
        self._rules.append((rule, True))
        return self

    # =========================================================================
    # Options
    # =========================================================================

    def default_mode(self, mode: ValidationMode) -> ValidatorBuilder:
        """Per-field mode for rules declared without an explicit mode."""
        self._default_mode = ValidationMode(mode)
        return self

    def message_source(self, source: MessageSource) -> ValidatorBuilder:
        self._source = source
        return self

    def registry(self, registry: ValidatorRegistry) -> ValidatorBuilder:
        self._registry = registry
        return self

    def strict_accessors(self, strict: bool = True) -> ValidatorBuilder:
        self._strict = strict
        return self

    def max_depth(self, depth: int) -> ValidatorBuilder:
        if depth < 1: raise invalid_definition(f"max_depth must be >= 1, got {depth}", max_depth=depth)
        self._max_depth = depth
        return self

    def name(self, label: str) -> ValidatorBuilder:
        self._name = label
        return self

    def build(self) -> Validator:
        settings = get_settings()
        rules = tuple(rule if explicit or not isinstance(rule, ConstraintRule) else replace(rule, mode=self._default_mode)
            for rule, explicit in self._rules)
        return Validator(
            rules=rules,
            messages=MessageFormatter(self._source) if self._source is not None else MessageFormatter(),
            registry=self._registry,
            strict_accessors=settings.STRICT_ACCESSORS if self._strict is None else self._strict,
            max_depth=settings.MAX_NESTING_DEPTH if self._max_depth is None else self._max_depth,
            name=self._name,
        )
