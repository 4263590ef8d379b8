"""Expression data model.

An expression is an immutable tree over a closed set of node types:

- ``Constant``: an exact ``int``/``Fraction`` or a finite ``float``
- ``Variable``: a named unknown
- ``Negate``: unary minus
- ``BinaryOp``: one of ``BinOpKind`` applied to a left and right subtree

Equality is structural: ``add(a, b) != add(b, a)``. Every transformation in
the engine builds new trees; nothing is mutated in place, so subtrees may be
shared freely.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from .arithmetic import Number, is_finite, is_number, normalize, to_json
from .config import VAR_NAME_RE
from .types import InvalidVariableNameError, NonFiniteConstantError


class BinOpKind(Enum):
    """Binary operations, keyed by their operator symbol."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_commutative(self) -> bool:
        return self in (BinOpKind.ADD, BinOpKind.MUL)

    def __str__(self) -> str:
        return self.name


def _coerce(value: Any) -> Any:
    if isinstance(value, Expression):
        return value
    if is_number(value):
        return Constant(value)
    return NotImplemented


class Expression:
    """Base class of all expression nodes."""

    __slots__ = ()

    def children(self) -> tuple[Expression, ...]:
        return ()

    def walk(self) -> Iterator[Expression]:
        """Yield every node in pre-order."""
        stack: list[Expression] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def depth(self) -> int:
        deepest = 0
        stack: list[tuple[Expression, int]] = [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children())
        return deepest

    def size(self) -> int:
        return sum(1 for _ in self.walk())

    def free_variables(self) -> frozenset[str]:
        return frozenset(
            node.name for node in self.walk() if isinstance(node, Variable)
        )

    def count_occurrences(self, name: str) -> int:
        """Number of ``Variable`` nodes named ``name`` (not distinct names)."""
        return sum(
            1 for node in self.walk() if isinstance(node, Variable) and node.name == name
        )

    def contains(self, name: str) -> bool:
        return any(
            isinstance(node, Variable) and node.name == name for node in self.walk()
        )

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    # Operator sugar: plain numbers on either side are wrapped in Constant.

    def __add__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else add(self, other)

    def __radd__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else add(other, self)

    def __sub__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else sub(self, other)

    def __rsub__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else sub(other, self)

    def __mul__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else mul(self, other)

    def __rmul__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else mul(other, self)

    def __truediv__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else div(self, other)

    def __rtruediv__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else div(other, self)

    def __pow__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else power(self, other)

    def __rpow__(self, other: Any) -> Expression:
        other = _coerce(other)
        return NotImplemented if other is NotImplemented else power(other, self)

    def __neg__(self) -> Expression:
        return Negate(self)


@dataclass(frozen=True)
class Constant(Expression):
    """A numeric literal. Whole-number fractions are stored as ``int``."""

    value: Number

    def __post_init__(self) -> None:
        if not is_number(self.value):
            raise TypeError(
                f"Constant value must be int, Fraction or float, got {type(self.value).__name__}"
            )
        if not is_finite(self.value):
            raise NonFiniteConstantError(self.value)
        object.__setattr__(self, "value", normalize(self.value))

    def to_dict(self) -> dict[str, Any]:
        return {"type": "constant", "value": to_json(self.value)}

    def __repr__(self) -> str:
        return f"Constant({self.value!r})"


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not VAR_NAME_RE.fullmatch(self.name):
            raise InvalidVariableNameError(self.name)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "variable", "name": self.name}

    def __repr__(self) -> str:
        return f"Variable({self.name!r})"


@dataclass(frozen=True)
class Negate(Expression):
    inner: Expression

    def __post_init__(self) -> None:
        if not isinstance(self.inner, Expression):
            raise TypeError(f"Negate operand must be an Expression, got {self.inner!r}")

    def children(self) -> tuple[Expression, ...]:
        return (self.inner,)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "negate", "inner": self.inner.to_dict()}

    def __repr__(self) -> str:
        return f"Negate({self.inner!r})"


@dataclass(frozen=True)
class BinaryOp(Expression):
    """``left <kind> right``. Operand order is significant for SUB, DIV and POW."""

    kind: BinOpKind
    left: Expression
    right: Expression

    def __post_init__(self) -> None:
        if not isinstance(self.kind, BinOpKind):
            raise TypeError(f"BinaryOp kind must be a BinOpKind, got {self.kind!r}")
        for operand in (self.left, self.right):
            if not isinstance(operand, Expression):
                raise TypeError(
                    f"BinaryOp operands must be Expressions, got {operand!r}"
                )

    def children(self) -> tuple[Expression, ...]:
        return (self.left, self.right)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "binary",
            "op": self.kind.symbol,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }

    def __repr__(self) -> str:
        return f"BinaryOp({self.kind}, {self.left!r}, {self.right!r})"


def const(value: Number) -> Constant:
    return Constant(value)


def var(name: str) -> Variable:
    return Variable(name)


def neg(inner: Expression) -> Negate:
    return Negate(inner)


def add(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinOpKind.ADD, left, right)


def sub(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinOpKind.SUB, left, right)


def mul(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinOpKind.MUL, left, right)


def div(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinOpKind.DIV, left, right)


def power(base: Expression, exponent: Expression) -> BinaryOp:
    return BinaryOp(BinOpKind.POW, base, exponent)


def is_constant(node: Expression, value: Number | None = None) -> bool:
    """True if ``node`` is a Constant (equal to ``value`` when given)."""
    if not isinstance(node, Constant):
        return False
    return value is None or node.value == value
