"""Collection Constraints

Sizes use len(); strings are not collections here (use CharSequenceConstraint).
"""
from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from typing import Any, Callable, Self

from .base import ObjectConstraint, make_predicate


def _sized(fn: Callable[[Any], bool]) -> Callable[[Any], bool]:
    return lambda v: isinstance(v, Collection) and not isinstance(v, (str, bytes)) and fn(v)


def duplicates(items: Collection) -> list:
    """Elements seen more than once, in first-repeat order."""
    seen: list = []
    dupes: list = []
    hashed: set = set()
    for item in items:
        try:
            if item in hashed:
                if item not in dupes: dupes.append(item)
            hashed.add(item)
        except TypeError:
            if item in seen:
                if item not in dupes: dupes.append(item)
            else:
                seen.append(item)
    return dupes


@dataclass(frozen=True, slots=True)
class CollectionConstraint(ObjectConstraint):
    """Constraints for lists, tuples, sets and mappings."""

    def not_empty(self) -> Self:
        return self._add_predicate(make_predicate(_sized(lambda v: len(v) > 0), "container.notEmpty",
            null_as=False))

    def _size(self, key: str, compare: Callable[[int], bool], bound: int) -> Self:
        return self._add_predicate(make_predicate(_sized(lambda v: compare(len(v))), key,
            args=lambda v: (bound, len(v) if isinstance(v, Collection) else None)))

    def fixed_size(self, size: int) -> Self:
        return self._size("container.fixedSize", lambda n: n == size, size)

    def greater_than(self, min_size: int) -> Self:
        return self._size("container.greaterThan", lambda n: n > min_size, min_size)

    def greater_than_or_equal(self, min_size: int) -> Self:
        return self._size("container.greaterThanOrEqual", lambda n: n >= min_size, min_size)

    def less_than(self, max_size: int) -> Self:
        return self._size("container.lessThan", lambda n: n < max_size, max_size)

    def less_than_or_equal(self, max_size: int) -> Self:
        return self._size("container.lessThanOrEqual", lambda n: n <= max_size, max_size)

    def contains(self, element: Any) -> Self:
        return self._add_predicate(make_predicate(_sized(lambda v: element in v), "collection.contains",
            args=lambda v: (element,)))

    def unique(self) -> Self:
        return self._add_predicate(make_predicate(_sized(lambda v: not duplicates(v)), "collection.unique",
            args=lambda v: (duplicates(v),)))
