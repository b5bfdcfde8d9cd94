"""Constraint Groups

A group selects which rules apply in one validation call, so the same
validator can check a target differently for "create" and "update".
Rules declared without a group apply to every group.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class ConstraintGroup:
    id: str

    DEFAULT: ClassVar[ConstraintGroup]

    @classmethod
    def of(cls, group: ConstraintGroup | Enum | str | None) -> ConstraintGroup:
        """Coerce an Enum member or a name into a group; None is DEFAULT."""
        if group is None: return cls.DEFAULT
        if isinstance(group, ConstraintGroup): return group
        if isinstance(group, Enum): return cls(group.name)
        return cls(str(group))

    def __str__(self) -> str:
        return self.id


ConstraintGroup.DEFAULT = ConstraintGroup("DEFAULT")
