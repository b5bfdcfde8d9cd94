"""Numeric Constraints

Values must be real numbers (int, float, Decimal, Fraction); bool and
non-numeric values fail every comparison.
"""
from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from decimal import Decimal
from typing import Any, Callable, Self

from .base import ObjectConstraint, make_predicate


def _number(fn: Callable[[Any], bool]) -> Callable[[Any], bool]:
    return lambda v: isinstance(v, (Real, Decimal)) and not isinstance(v, bool) and fn(v)


@dataclass(frozen=True, slots=True)
class NumericConstraint(ObjectConstraint):
    """Constraints for numbers."""

    def greater_than(self, min_value: Any) -> Self:
        return self._add_predicate(make_predicate(_number(lambda v: v > min_value), "numeric.greaterThan",
            args=lambda v: (min_value,)))

    def greater_than_or_equal(self, min_value: Any) -> Self:
        return self._add_predicate(make_predicate(_number(lambda v: v >= min_value),
            "numeric.greaterThanOrEqual", args=lambda v: (min_value,)))

    def less_than(self, max_value: Any) -> Self:
        return self._add_predicate(make_predicate(_number(lambda v: v < max_value), "numeric.lessThan",
            args=lambda v: (max_value,)))

    def less_than_or_equal(self, max_value: Any) -> Self:
        return self._add_predicate(make_predicate(_number(lambda v: v <= max_value),
            "numeric.lessThanOrEqual", args=lambda v: (max_value,)))

    def between(self, min_value: Any, max_value: Any) -> Self:
        """Inclusive range."""
        return self._add_predicate(make_predicate(_number(lambda v: min_value <= v <= max_value),
            "numeric.between", args=lambda v: (min_value, max_value)))

    def positive(self) -> Self:
        return self._add_predicate(make_predicate(_number(lambda v: v > 0), "numeric.positive"))

    def positive_or_zero(self) -> Self:
        return self._add_predicate(make_predicate(_number(lambda v: v >= 0), "numeric.positiveOrZero"))

    def negative(self) -> Self:
        return self._add_predicate(make_predicate(_number(lambda v: v < 0), "numeric.negative"))

    def negative_or_zero(self) -> Self:
        return self._add_predicate(make_predicate(_number(lambda v: v <= 0), "numeric.negativeOrZero"))
