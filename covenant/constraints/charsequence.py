"""String Constraints

Size predicates count Unicode code points of the normalized value (NFC by
default), so "モジ" has size 2 and a supplementary ideograph has size 1.
normalizer(None) counts the code points actually stored. Variation
selectors count unless variant(...) ignores them.

Format predicates (email, url, ip_v4, ip_v6, uuid) accept the empty string:
presence is checked separately with not_empty() / not_blank().
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Callable, Self
from urllib.parse import urlsplit
from uuid import UUID

from .base import ObjectConstraint, make_predicate
from .normalizer import (
    IdeographicVariationSequence,
    MongolianFreeVariationSelector,
    NormalForm,
    Normalizer,
    StandardizedVariationSequence,
)
from .predicates import Predicate

# Atom of an address: no controls, whitespace, specials or dots
_ATOM = r'[^\x00-\x1F\x7F()<>@,;:\\".\[\]\s]+'
_DOT_ATOM = rf"{_ATOM}(?:\.{_ATOM})*"
_IP_LITERAL = r"\[[0-9A-Fa-f:.]+\]"
_EMAIL = re.compile(rf"{_DOT_ATOM}@(?:{_DOT_ATOM}|{_IP_LITERAL})")

_INTEGRAL = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_NON_FINITE = re.compile(r"[+-]?(?:NaN|Infinity)")

DEFAULT_URL_SCHEMES = frozenset({"http", "https", "ftp", "ftps", "file"})

# Two's-complement bounds of the fixed-width integral types
BYTE_RANGE = (-(2 ** 7), 2 ** 7 - 1)
SHORT_RANGE = (-(2 ** 15), 2 ** 15 - 1)
INTEGER_RANGE = (-(2 ** 31), 2 ** 31 - 1)
LONG_RANGE = (-(2 ** 63), 2 ** 63 - 1)
FLOAT_MAX = 3.4028234663852886e38
LONG_DIGITS = 19
BIG_DECIMAL_MAX_EXPONENT = 2 ** 31 - 1  # 32-bit scale of arbitrary-precision decimals


def _text(fn: Callable[[str], bool]) -> Callable[[Any], bool]:
    """Make a string test total: non-str values fail."""
    return lambda v: isinstance(v, str) and fn(v)


def _in_range(bounds: tuple[int, int]) -> Callable[[str], bool]:
    lo, hi = bounds
    def test(v: str) -> bool:
        if _INTEGRAL.fullmatch(v) is None: return False
        if len(v.lstrip("+-").lstrip("0")) > LONG_DIGITS: return False
        return lo <= int(v) <= hi
    return test


def is_email(value: str) -> bool:
    return value == "" or _EMAIL.fullmatch(value) is not None


def is_url(value: str, schemes: frozenset[str] = DEFAULT_URL_SCHEMES) -> bool:
    if value == "": return True
    try:
        parts = urlsplit(value)
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if parts.scheme.lower() not in schemes: return False
    return parts.scheme.lower() == "file" or bool(parts.hostname)


def _is_ip(cls: type) -> Callable[[str], bool]:
    def test(value: str) -> bool:
        if value == "": return True
        try: cls(value)
        except ValueError: return False
        return True
    return test


def _is_uuid(value: str) -> bool:
    if value == "": return True
    try: UUID(value)
    except ValueError: return False
    return True


def _is_float(value: str) -> bool:
    if _NON_FINITE.fullmatch(value): return True
    if not _DECIMAL.fullmatch(value): return False
    return math.isfinite(parsed := float(value)) and abs(parsed) <= FLOAT_MAX


def _is_double(value: str) -> bool:
    if _NON_FINITE.fullmatch(value): return True
    return _DECIMAL.fullmatch(value) is not None and math.isfinite(float(value))


def _is_big_decimal(value: str) -> bool:
    if not _DECIMAL.fullmatch(value): return False
    try: parsed = Decimal(value)
    except InvalidOperation: return False
    return parsed.is_finite() and abs(parsed.adjusted()) <= BIG_DECIMAL_MAX_EXPONENT


@dataclass(frozen=True, slots=True)
class CharSequenceConstraint(ObjectConstraint):
    """Constraints for str values."""
    normalizer_config: Normalizer = Normalizer()

    # ------------------------------------------------------------------
    # Measurement settings (apply to every size/pattern predicate)
    # ------------------------------------------------------------------

    def normalizer(self, form: NormalForm | str | None) -> Self:
        """Normal form used before measuring; None disables normalization."""
        return replace(self, normalizer_config=self.normalizer_config.with_form(form))

    def variant(
        self,
        *,
        ivs: IdeographicVariationSequence | None = None,
        fvs: MongolianFreeVariationSelector | None = None,
        svs: StandardizedVariationSequence | None = None,
    ) -> Self:
        """Choose which variation selectors are left out of the size."""
        n = self.normalizer_config
        return replace(self, normalizer_config=Normalizer(form=n.form, ivs=ivs or n.ivs, fvs=fvs or n.fvs,
            svs=svs or n.svs))

    # ------------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------------

    def not_empty(self) -> Self:
        return self._add_predicate(make_predicate(_text(lambda v: len(v) > 0), "container.notEmpty",
            null_as=False))

    def not_blank(self) -> Self:
        # str.strip() also removes U+3000 IDEOGRAPHIC SPACE
        return self._add_predicate(make_predicate(_text(lambda v: v.strip() != ""), "charSequence.notBlank",
            null_as=False))

    # ------------------------------------------------------------------
    # Size
    # ------------------------------------------------------------------

    def _size(self, key: str, compare: Callable[[int], bool], bound: int) -> Self:
        def factory(c: CharSequenceConstraint) -> Predicate:
            size = c.normalizer_config.size
            return make_predicate(_text(lambda v: compare(size(v))), key,
                args=lambda v: (bound, size(v) if isinstance(v, str) else None))
        return self._add(factory)

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

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def pattern(self, regex: str | re.Pattern, flags: int = 0) -> Self:
        """The whole normalized value must match regex."""
        compiled = regex if isinstance(regex, re.Pattern) else re.compile(regex, flags)

        def factory(c: CharSequenceConstraint) -> Predicate:
            normalize = c.normalizer_config.normalize
            return make_predicate(_text(lambda v: compiled.fullmatch(normalize(v)) is not None),
                "charSequence.pattern", args=lambda v: (compiled.pattern,))
        return self._add(factory)

    def contains(self, s: str) -> Self:
        return self._add_predicate(make_predicate(_text(lambda v: s in v), "charSequence.contains",
            args=lambda v: (s,)))

    def starts_with(self, prefix: str) -> Self:
        return self._add_predicate(make_predicate(_text(lambda v: v.startswith(prefix)),
            "charSequence.startsWith", args=lambda v: (prefix,)))

    def ends_with(self, suffix: str) -> Self:
        return self._add_predicate(make_predicate(_text(lambda v: v.endswith(suffix)),
            "charSequence.endsWith", args=lambda v: (suffix,)))

    # ------------------------------------------------------------------
    # Formats (empty string is valid)
    # ------------------------------------------------------------------

    def email(self) -> Self:
        return self._add_predicate(make_predicate(_text(is_email), "charSequence.email"))

    def url(self, schemes: frozenset[str] | set[str] | None = None) -> Self:
        allowed = frozenset(s.lower() for s in schemes) if schemes else DEFAULT_URL_SCHEMES
        return self._add_predicate(make_predicate(_text(lambda v: is_url(v, allowed)), "charSequence.url"))

    def ip_v4(self) -> Self:
        return self._add_predicate(make_predicate(_text(_is_ip(IPv4Address)), "charSequence.ipv4"))

    def ip_v6(self) -> Self:
        return self._add_predicate(make_predicate(_text(_is_ip(IPv6Address)), "charSequence.ipv6"))

    def uuid(self) -> Self:
        return self._add_predicate(make_predicate(_text(_is_uuid), "charSequence.uuid"))

    # ------------------------------------------------------------------
    # Numeric representations
    # ------------------------------------------------------------------

    def is_byte(self) -> Self:
        return self._add_predicate(make_predicate(_text(_in_range(BYTE_RANGE)), "charSequence.byte"))

    def is_short(self) -> Self:
        return self._add_predicate(make_predicate(_text(_in_range(SHORT_RANGE)), "charSequence.short"))

    def is_integer(self) -> Self:
        return self._add_predicate(make_predicate(_text(_in_range(INTEGER_RANGE)), "charSequence.integer"))

    def is_long(self) -> Self:
        return self._add_predicate(make_predicate(_text(_in_range(LONG_RANGE)), "charSequence.long"))

    def is_big_integer(self) -> Self:
        return self._add_predicate(make_predicate(_text(lambda v: _INTEGRAL.fullmatch(v) is not None),
            "charSequence.bigInteger"))

    def is_float(self) -> Self:
        return self._add_predicate(make_predicate(_text(_is_float), "charSequence.float"))

    def is_double(self) -> Self:
        return self._add_predicate(make_predicate(_text(_is_double), "charSequence.double"))

    def is_big_decimal(self) -> Self:
        return self._add_predicate(make_predicate(_text(_is_big_decimal), "charSequence.bigDecimal"))
