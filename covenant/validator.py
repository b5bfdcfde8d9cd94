"""Validation Engine

Runs one full pass over a target: selects the rules active for the requested
group, evaluates each field's predicates, recurses into nested and
collection-typed sub-targets, and returns the violations in rule order.

Architecture:
- Validator: immutable rule set plus collaborators (message formatter,
  nested-validator registry); safe to share across threads
- _ValidationPass: per-call state (locale, group, path stack, output)
- ValidatorRegistry: type -> Validator lookup for recursion into fields
  whose validator is not declared explicitly

Nested violation names carry the parent path: "address.city",
"items[0].name", "labels[en]".
"""
from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator

from covenant.core.errors import Result, nesting_too_deep, null_target
from covenant.core.logging import validation_logger
from covenant.groups import ConstraintGroup
from covenant.messages import MessageFormatter, default_locale, normalize_locale
from covenant.rules import ConstraintRule, NestedRule, Rule
from covenant.violations import ConstraintViolation, ConstraintViolations

if TYPE_CHECKING:
    from covenant.builder import ValidatorBuilder
    from covenant.either import EitherValidator

log = validation_logger()

ACCESSOR_ERRORS = (AttributeError, KeyError, IndexError, TypeError)


class ValidatorRegistry:
    """Maps a target type to the validator used when recursing into it.

    Lookup walks the MRO, so a validator registered for a base class also
    covers its subclasses. Registration happens at setup time; a validator
    may be registered after another validator referencing this registry
    was built, which is how self-referencing types are declared.
    """

    def __init__(self, validators: Mapping[type, Validator] | None = None):
        self._validators: dict[type, Validator] = dict(validators or {})

    def register(self, target_type: type, validator: Validator) -> ValidatorRegistry:
        self._validators[target_type] = validator
        return self

    def lookup(self, target_type: type) -> Validator | None:
        for klass in target_type.__mro__:
            if (validator := self._validators.get(klass)) is not None: return validator
        return None

    def __contains__(self, target_type: type) -> bool: return self.lookup(target_type) is not None

    def __len__(self) -> int: return len(self._validators)


def _elements(value: Any) -> Iterator[tuple[Any, Any]]:
    """(index or key, element) pairs of a collection; strings are leaves."""
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Collection): return iter(())
    if isinstance(value, Mapping): return iter(value.items())
    return enumerate(value)


@dataclass(frozen=True, slots=True)
class Validator:
    """Immutable rule set; build with Validator.builder()."""
    rules: tuple[Rule, ...]
    messages: MessageFormatter = field(default_factory=MessageFormatter)
    registry: ValidatorRegistry | None = None
    strict_accessors: bool = False
    max_depth: int = 32
    name: str = ""
    _nested_names: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_nested_names", frozenset(r.name for r in self.rules if isinstance(r, NestedRule)))

    @staticmethod
    def builder() -> ValidatorBuilder:
        from covenant.builder import ValidatorBuilder
        return ValidatorBuilder()

    @property
    def nested_names(self) -> frozenset[str]:
        """Names declared by nest/for_each; registry recursion skips them."""
        return self._nested_names

    def validate(self, target: Any, locale: str | None = None,
                 group: ConstraintGroup | Any = ConstraintGroup.DEFAULT) -> ConstraintViolations:
        """Validate target; violations are returned, never raised.

        Raises ContractViolationError if target is None.
        """
        if target is None: raise null_target(origin=self.name or type(self).__name__)
        ctx = _ValidationPass(locale=normalize_locale(locale) if locale else default_locale(),
            group=ConstraintGroup.of(group), max_depth=self.max_depth, registry=self.registry)
        ctx.run(self, target, depth=0)
        violations = ConstraintViolations(ctx.violations)
        log.debug("validation_completed", validator=self.name or type(target).__name__, group=str(ctx.group),
            locale=ctx.locale, violations=len(violations))
        return violations

    def either(self) -> EitherValidator:
        from covenant.either import EitherValidator
        return EitherValidator(self)

    def validate_either(self, target: Any, locale: str | None = None,
                        group: ConstraintGroup | Any = ConstraintGroup.DEFAULT) -> Result[Any, ConstraintViolations]:
        """Ok(target) when valid, Err(violations) otherwise."""
        return self.either().validate(target, locale, group)


class _ValidationPass:
    """State of one validate() call."""

    __slots__ = ("locale", "group", "max_depth", "registry", "violations", "_path_stack")

    def __init__(self, locale: str, group: ConstraintGroup, max_depth: int, registry: ValidatorRegistry | None):
        self.locale, self.group, self.max_depth, self.registry = locale, group, max_depth, registry
        self.violations: list[ConstraintViolation] = []
        self._path_stack: list[str] = []

    def push_path(self, segment: str | int, indexed: bool = False) -> None:
        self._path_stack.append(f"[{segment}]" if indexed else str(segment))

    def pop_path(self) -> str | None: return self._path_stack.pop() if self._path_stack else None

    @property
    def current_path(self) -> str:
        path = ""
        for segment in self._path_stack:
            path += segment if segment.startswith("[") or not path else f".{segment}"
        return path

    def run(self, validator: Validator, target: Any, depth: int) -> None:
        registry = validator.registry if validator.registry is not None else self.registry
        nested = validator.nested_names
        for rule in validator.rules:
            if not rule.applies(target, self.group): continue
            value = self._read(rule, target, validator.strict_accessors)
            self.push_path(rule.name)
            try:
                if isinstance(rule, ConstraintRule):
                    self._evaluate(validator, rule, value)
                    if registry is not None and value is not None and rule.name not in nested:
                        self._recurse_registered(registry, value, depth)
                elif value is not None:
                    self._nest(rule, value, registry, depth)
            finally:
                self.pop_path()

    @staticmethod
    def _read(rule: Rule, target: Any, strict: bool) -> Any:
        try:
            return rule.accessor(target)
        except ACCESSOR_ERRORS:
            if strict: raise
            return None

    def _evaluate(self, validator: Validator, rule: ConstraintRule, value: Any) -> None:
        name = self.current_path
        for pred in rule.failures(value):
            args = (name, *pred.arguments(value))
            message = validator.messages.format(pred.message_key, args, self.locale, pred.default_message)
            self.violations.append(ConstraintViolation(name=name, message_key=pred.message_key, message=message,
                args=args, value=value))

    def _descend(self, validator: Validator, target: Any, depth: int) -> None:
        if depth + 1 > self.max_depth: raise nesting_too_deep(self.current_path, self.max_depth)
        self.run(validator, target, depth + 1)

    def _nest(self, rule: NestedRule, value: Any, registry: ValidatorRegistry | None, depth: int) -> None:
        if not rule.iterable:
            if (validator := rule.validator or self._lookup(registry, value)) is not None:
                self._descend(validator, value, depth)
            return
        for key, element in _elements(value):
            if element is None: continue
            if (validator := rule.validator or self._lookup(registry, element)) is None: continue
            self.push_path(key, indexed=True)
            try:
                self._descend(validator, element, depth)
            finally:
                self.pop_path()

    def _recurse_registered(self, registry: ValidatorRegistry, value: Any, depth: int) -> None:
        if (validator := registry.lookup(type(value))) is not None:
            self._descend(validator, value, depth)
            return
        for key, element in _elements(value):
            if element is None or (validator := registry.lookup(type(element))) is None: continue
            self.push_path(key, indexed=True)
            try:
                self._descend(validator, element, depth)
            finally:
                self.pop_path()

    @staticmethod
    def _lookup(registry: ValidatorRegistry | None, value: Any) -> Validator | None:
        return registry.lookup(type(value)) if registry is not None else None
