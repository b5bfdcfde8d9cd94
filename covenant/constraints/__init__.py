"""Constraint Catalog

Predicates, Unicode normalization, and the immutable constraint builders
used to declare validator rules.
"""
from .predicates import Predicate, predicate
from .normalizer import (
    DEFAULT_NORMALIZER,
    IdeographicVariationSequence,
    MongolianFreeVariationSelector,
    NormalForm,
    Normalizer,
    StandardizedVariationSequence,
)
from .base import ObjectConstraint, make_predicate
from .charsequence import CharSequenceConstraint, is_email, is_url
from .numeric import NumericConstraint
from .collection import CollectionConstraint

__all__ = [
    "Predicate",
    "predicate",
    "DEFAULT_NORMALIZER",
    "IdeographicVariationSequence",
    "MongolianFreeVariationSelector",
    "NormalForm",
    "Normalizer",
    "StandardizedVariationSequence",
    "ObjectConstraint",
    "make_predicate",
    "CharSequenceConstraint",
    "is_email",
    "is_url",
    "NumericConstraint",
    "CollectionConstraint",
]
