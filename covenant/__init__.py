"""covenant - declarative, immutable object validation.

Usage:
    from covenant import Validator

    user_validator = (
        Validator.builder()
        .constraint_str("name", lambda u: u.name, lambda c: c.not_blank().less_than_or_equal(20))
        .constraint_str("email", lambda u: u.email, lambda c: c.not_blank().email())
        .constraint_number("age", lambda u: u.age, lambda c: c.between(0, 150))
        .build()
    )

    violations = user_validator.validate(user)
    if not violations.is_valid():
        for v in violations:
            print(v.name, v.message)
"""
from covenant.builder import ValidatorBuilder
from covenant.constraints import (
    CharSequenceConstraint,
    CollectionConstraint,
    IdeographicVariationSequence,
    MongolianFreeVariationSelector,
    NormalForm,
    Normalizer,
    NumericConstraint,
    ObjectConstraint,
    Predicate,
    StandardizedVariationSequence,
    predicate,
)
from covenant.core.errors import (
    AppError,
    ContractViolationError,
    Err,
    ErrorCode,
    NestingDepthExceededError,
    Ok,
    Result,
)
from covenant.either import EitherValidator
from covenant.groups import ConstraintGroup
from covenant.messages import (
    ChainedMessageSource,
    DictMessageSource,
    MessageFormatter,
    MessageSource,
    YamlMessageSource,
)
from covenant.rules import ConstraintRule, NestedRule, ValidationMode
from covenant.validator import Validator, ValidatorRegistry
from covenant.violations import ConstraintViolation, ConstraintViolations, ConstraintViolationsError

__version__ = "0.1.0"

__all__ = [
    "Validator",
    "ValidatorBuilder",
    "ValidatorRegistry",
    "EitherValidator",
    "ValidationMode",
    "ConstraintRule",
    "NestedRule",
    "ConstraintGroup",
    "ConstraintViolation",
    "ConstraintViolations",
    "ConstraintViolationsError",
    "Predicate",
    "predicate",
    "ObjectConstraint",
    "CharSequenceConstraint",
    "NumericConstraint",
    "CollectionConstraint",
    "Normalizer",
    "NormalForm",
    "IdeographicVariationSequence",
    "MongolianFreeVariationSelector",
    "StandardizedVariationSequence",
    "MessageSource",
    "MessageFormatter",
    "DictMessageSource",
    "YamlMessageSource",
    "ChainedMessageSource",
    "Ok",
    "Err",
    "Result",
    "AppError",
    "ErrorCode",
    "ContractViolationError",
    "NestingDepthExceededError",
]
