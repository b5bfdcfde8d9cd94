"""Shared pytest fixtures and helpers for the covenant test suite.

Provides:
- Target types (Address, User, Item, Order, Node) shared by engine tests.
- _passes(constraint, value): True when every predicate of a constraint
  accepts value; importable directly by test modules.

pytest fixtures:
    english             — pins the default locale to "en" (autouse).
    address_validator   — city not blank, zip code of 7 digits.
    user_validator      — name, email, age plus nested address.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from covenant import Validator
from covenant.constraints import ObjectConstraint


# ─── Target Types ─────────────────────────────────────────────────────────────


@dataclass
class Address:
    city: str | None = None
    zip_code: str | None = None


@dataclass
class User:
    name: str | None = None
    email: str | None = None
    age: int | None = None
    address: Address | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class Item:
    name: str | None = None
    quantity: int = 1


@dataclass
class Order:
    id: str | None = None
    items: list[Item] = field(default_factory=list)


@dataclass
class Node:
    label: str | None = None
    next: Node | None = None


# ─── Module-Level Helpers ─────────────────────────────────────────────────────


def _passes(constraint: ObjectConstraint, value: Any) -> bool:
    """Evaluate every predicate of a constraint against one value."""
    return all(p(value) for p in constraint.predicates)


# ─── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def english(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep rendered messages independent of the machine's locale."""
    monkeypatch.setattr("covenant.validator.default_locale", lambda: "en")


@pytest.fixture
def address_validator() -> Validator:
    return (
        Validator.builder()
        .constraint_str("city", lambda a: a.city, lambda c: c.not_blank())
        .constraint_str("zip_code", lambda a: a.zip_code, lambda c: c.not_blank().pattern(r"[0-9]{7}"))
        .build()
    )


@pytest.fixture
def user_validator(address_validator: Validator) -> Validator:
    return (
        Validator.builder()
        .constraint_str("name", lambda u: u.name, lambda c: c.not_blank().less_than_or_equal(20))
        .constraint_str("email", lambda u: u.email, lambda c: c.not_blank().email())
        .constraint_number("age", lambda u: u.age, lambda c: c.not_null().between(0, 150))
        .nest("address", lambda u: u.address, address_validator)
        .build()
    )
