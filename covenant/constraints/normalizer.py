"""Unicode Normalization for Text Measurement

String size and pattern predicates measure the value after Unicode
normalization, so a base character followed by a combining mark counts as
one character (NFC) and a supplementary character counts as one code point.
Variation selectors can optionally be dropped from the count.

The stored field value is never modified; normalization only feeds the
measurement.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache


class NormalForm(str, Enum):
    NFC = "NFC"
    NFD = "NFD"
    NFKC = "NFKC"
    NFKD = "NFKD"


class IdeographicVariationSequence(str, Enum):
    """Ideographic variation selectors VS17-VS256 (U+E0100..U+E01EF)."""
    IGNORE = "ignore"
    NOT_IGNORE = "not_ignore"


class MongolianFreeVariationSelector(str, Enum):
    """Mongolian free variation selectors FVS1-FVS4 (U+180B..U+180D, U+180F)."""
    IGNORE = "ignore"
    NOT_IGNORE = "not_ignore"


class StandardizedVariationSequence(str, Enum):
    """Standardized variation selectors VS1-VS16 (U+FE00..U+FE0F)."""
    IGNORE = "ignore"
    NOT_IGNORE = "not_ignore"


_IVS_CLASS = "\U000E0100-\U000E01EF"
_FVS_CLASS = "\u180b-\u180d\u180f"
_SVS_CLASS = "\ufe00-\ufe0f"


@dataclass(frozen=True, slots=True)
class Normalizer:
    """Normalization applied before measuring a string.

    form=None disables normalization: the count is the number of code
    points actually present in the value.
    """
    form: NormalForm | None = NormalForm.NFC
    ivs: IdeographicVariationSequence = IdeographicVariationSequence.NOT_IGNORE
    fvs: MongolianFreeVariationSelector = MongolianFreeVariationSelector.NOT_IGNORE
    svs: StandardizedVariationSequence = StandardizedVariationSequence.NOT_IGNORE

    @property
    def _ignored(self) -> re.Pattern | None:
        return _ignored_pattern(
            self.ivs is IdeographicVariationSequence.IGNORE,
            self.fvs is MongolianFreeVariationSelector.IGNORE,
            self.svs is StandardizedVariationSequence.IGNORE,
        )

    def normalize(self, value: str) -> str:
        """Apply the normal form only."""
        return unicodedata.normalize(self.form.value, value) if self.form else value

    def measurable(self, value: str) -> str:
        """Normalized value with ignored variation selectors removed."""
        normalized = self.normalize(value)
        if (pattern := self._ignored) is None: return normalized
        return pattern.sub("", normalized)

    def size(self, value: str) -> int:
        """Number of code points counted for length predicates."""
        return len(self.measurable(value))

    def with_form(self, form: NormalForm | str | None) -> Normalizer:
        return Normalizer(form=NormalForm(form) if form else None, ivs=self.ivs, fvs=self.fvs, svs=self.svs)


@lru_cache(maxsize=None)
def _ignored_pattern(ivs: bool, fvs: bool, svs: bool) -> re.Pattern | None:
    flags = (ivs, fvs, svs)
    ranges = "".join(r for flag, r in zip(flags, (_IVS_CLASS, _FVS_CLASS, _SVS_CLASS)) if flag)
    return re.compile(f"[{ranges}]") if ranges else None


DEFAULT_NORMALIZER = Normalizer()
