"""Raised Error Types

Contract violations are raised, never collected. They wrap an AppError so
error-boundary code can log or serialize them the same way as Result errors.
"""
from __future__ import annotations

from .types import AppError


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when an AppError has to leave code that does not return a Result.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))

    @property
    def code(self):
        return self.error.code


class ContractViolationError(AppErrorException, ValueError):
    """Programmer error: the validation API was called with invalid arguments."""


class NestingDepthExceededError(ContractViolationError):
    """Nested validation recursed past the configured depth (likely a cycle)."""
