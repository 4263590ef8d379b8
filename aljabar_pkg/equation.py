"""Equations: an ordered pair of expressions asserted equal."""

from __future__ import annotations

from dataclasses import dataclass

from .expression import Expression


@dataclass(frozen=True)
class Equation:
    """``lhs = rhs``. Side order is kept so results read the way the caller wrote them."""

    lhs: Expression
    rhs: Expression

    def __post_init__(self) -> None:
        for side in (self.lhs, self.rhs):
            if not isinstance(side, Expression):
                raise TypeError(f"Equation sides must be Expressions, got {side!r}")

    def free_variables(self) -> frozenset[str]:
        return self.lhs.free_variables() | self.rhs.free_variables()

    def count_occurrences(self, name: str) -> int:
        return self.lhs.count_occurrences(name) + self.rhs.count_occurrences(name)

    def __repr__(self) -> str:
        return f"Equation({self.lhs!r}, {self.rhs!r})"
