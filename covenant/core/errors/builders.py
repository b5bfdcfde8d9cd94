"""Error Builders

Ergonomic constructors for typed errors. Data-violation builders return
Err[AppError]; contract-violation builders return the exception to raise,
since misuse of a validator is never reported through a Result.
"""
from typing import Any

from .types import AppError, ErrorCode, ErrorContext, Err
from .exceptions import ContractViolationError, NestingDepthExceededError


# =============================================================================
# Data Violations (E20xx)
# =============================================================================

def validation_failed(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
    ))


# =============================================================================
# Contract Violations (E203x)
# =============================================================================

def contract_violation(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E9003_ASSERTION_FAILED,
    origin: str = "",
    **metadata: Any,
) -> ContractViolationError:
    """Build the exception for a misuse of the validation API."""
    return ContractViolationError(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
    ))


def null_target(origin: str = "") -> ContractViolationError:
    return contract_violation(
        "target must not be None",
        code=ErrorCode.E2030_NULL_TARGET,
        origin=origin,
    )


def empty_predicates(name: str, origin: str = "") -> ContractViolationError:
    return contract_violation(
        f"constraint '{name}' must declare at least one predicate",
        code=ErrorCode.E2031_EMPTY_PREDICATES,
        origin=origin,
        field=name,
    )


def invalid_definition(message: str, origin: str = "", **metadata: Any) -> ContractViolationError:
    return contract_violation(
        message,
        code=ErrorCode.E2033_INVALID_DEFINITION,
        origin=origin,
        **metadata,
    )


def nesting_too_deep(path: str, max_depth: int, origin: str = "") -> NestingDepthExceededError:
    return NestingDepthExceededError(AppError(
        code=ErrorCode.E2032_NESTING_TOO_DEEP,
        message=f"Nested validation of '{path}' exceeded the maximum depth of {max_depth}",
        context=ErrorContext(origin=origin),
        metadata={"path": path, "max_depth": max_depth},
    ))
