"""Error Handling System

- Result[T, E]: Ok / Err sum type for exhaustive branching
- AppError: error value with code, message, metadata and context
- ErrorCode: hierarchical error code taxonomy
- Raised errors for contract violations

Usage:
    from covenant.core.errors import Ok, Err

    match validator.validate_either(user):
        case Ok(valid_user):
            save(valid_user)
        case Err(violations):
            for v in violations:
                print(v.name, v.message)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    ok,
    err,
    collect_results,
    sequence_results,
)

from .exceptions import (
    AppErrorException,
    ContractViolationError,
    NestingDepthExceededError,
)

from .builders import (
    validation_failed,
    contract_violation,
    null_target,
    empty_predicates,
    invalid_definition,
    nesting_too_deep,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "ok",
    "err",
    "collect_results",
    "sequence_results",
    "AppErrorException",
    "ContractViolationError",
    "NestingDepthExceededError",
    "validation_failed",
    "contract_violation",
    "null_target",
    "empty_predicates",
    "invalid_definition",
    "nesting_too_deep",
]
