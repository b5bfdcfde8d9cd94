"""Constraint Predicates

A predicate is a pure test over one field value bound to the message key
that identifies it and to the arguments its message interpolates.

- Frozen dataclasses, safe to share between validators and threads
- None short-circuits to null_as: format and size predicates treat an
  absent value as "not applicable", presence predicates fail on it;
  null_as=None hands None to the test like any other value
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


def _no_args(value: Any) -> tuple:
    return ()


@dataclass(frozen=True, slots=True)
class Predicate:
    """One constraint check.

    - test: value -> bool, called with None only when null_as is None
    - message_key: key used to look up a localized template
    - default_message: built-in template used when no bundle resolves the key
    - args: value -> tuple of message arguments (placeholders {1}, {2}, ...)
    - null_as: result returned for None without calling test
    """
    test: Callable[[Any], bool]
    message_key: str
    default_message: str = ""
    args: Callable[[Any], tuple] = _no_args
    null_as: bool | None = True

    def __call__(self, value: Any) -> bool:
        if value is None and self.null_as is not None: return self.null_as
        return bool(self.test(value))

    def arguments(self, value: Any) -> tuple:
        """Message arguments for a failing value."""
        if value is None and self.null_as is not None: return ()
        return tuple(self.args(value))


def predicate(
    test: Callable[[Any], bool],
    message_key: str,
    default_message: str = "",
    *,
    args: Callable[[Any], tuple] | None = None,
    null_as: bool | None = True,
) -> Predicate:
    """Create a custom predicate.

    Usage:
        is_even = predicate(lambda n: n % 2 == 0, "custom.even", '"{0}" must be even')
    """
    return Predicate(test=test, message_key=message_key, default_message=default_message or message_key,
        args=args or _no_args, null_as=null_as)
