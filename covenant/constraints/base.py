"""Constraint Builders

A constraint is an immutable, staged list of predicates for one field. Each
method returns a new constraint with one more predicate; the original is
never modified, so partially-built constraints can be shared.

Predicates are materialized from factories when .predicates is read, which
lets settings such as a string constraint's normalizer apply to every
predicate regardless of declaration order.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Self

from covenant.messages import default_message

from .predicates import Predicate

PredicateFactory = Callable[[Any], Predicate]


def make_predicate(
    test: Callable[[Any], bool],
    key: str,
    *,
    args: Callable[[Any], tuple] | None = None,
    null_as: bool = True,
) -> Predicate:
    """Predicate with the built-in default template for key."""
    if args is None: return Predicate(test, key, default_message(key), null_as=null_as)
    return Predicate(test, key, default_message(key), args=args, null_as=null_as)


@dataclass(frozen=True, slots=True)
class ObjectConstraint:
    """Constraints applicable to any value."""
    factories: tuple[PredicateFactory, ...] = ()

    @property
    def predicates(self) -> tuple[Predicate, ...]:
        return tuple(f(self) for f in self.factories)

    def _add(self, factory: PredicateFactory) -> Self:
        return replace(self, factories=(*self.factories, factory))

    def _add_predicate(self, pred: Predicate) -> Self:
        return self._add(lambda _: pred)

    def not_null(self) -> Self:
        return self._add_predicate(make_predicate(lambda v: True, "object.notNull", null_as=False))

    def is_null(self) -> Self:
        return self._add_predicate(make_predicate(lambda v: False, "object.isNull", null_as=True))

    def equal_to(self, expected: Any) -> Self:
        return self._add_predicate(make_predicate(lambda v: v == expected, "object.equalTo",
            args=lambda v: (expected,)))

    def one_of(self, *values: Any) -> Self:
        allowed = tuple(values)
        return self._add_predicate(make_predicate(lambda v: v in allowed, "object.oneOf",
            args=lambda v: (list(allowed),)))

    def predicate(self, test: Callable[[Any], bool], message_key: str = "object.predicate",
                  message: str | None = None, *, args: Callable[[Any], tuple] | None = None) -> Self:
        """Custom predicate; None values pass (pair with not_null() to require presence)."""
        return self._add_predicate(Predicate(test, message_key, message or default_message(message_key),
            args=args or (lambda v: ()), null_as=True))

    def predicate_nullable(self, test: Callable[[Any], bool], message_key: str = "object.predicate",
                           message: str | None = None, *, args: Callable[[Any], tuple] | None = None) -> Self:
        """Custom predicate that is also called for None values."""
        return self._add_predicate(Predicate(test, message_key, message or default_message(message_key),
            args=args or (lambda v: ()), null_as=None))
