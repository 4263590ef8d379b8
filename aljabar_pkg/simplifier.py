"""Rule-based expression simplification.

This module provides:
- ``simplify``: bottom-up rewriting with a fixed, ordered rule set, repeated
  until a pass leaves the tree unchanged (a local fixpoint)
- ``find_undefined``: detection of provably undefined subterms that constant
  folding had to leave in place (division by zero, 0^0, ...)

Rules, in priority order at each node (first match wins):
1. Constant folding (exact for int/Fraction, float otherwise)
2. Additive identity: x + 0, 0 + x, x - 0
3. Multiplicative identity/annihilator: x * 1, 1 * x, x * 0, 0 * x, x / 1
4. Double negation: --x
5. Power identities: x^1, x^0, 1^x
6. Only with ``commutative_normal``: a - b -> a + (-b)

Operands of SUB, DIV and POW are never reordered, and like terms are never
merged. simplify() does not raise for a valid tree; a fold that would be
undefined leaves its node unfolded. The one exception is SimplifierDefect,
raised if the pass cap is reached, which means the rule set has a cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from . import arithmetic
from .config import SIMPLIFY_MAX_PASSES
from .expression import (
    BinaryOp,
    BinOpKind,
    Constant,
    Expression,
    Negate,
    Variable,
    add,
    is_constant,
)
from .logging_config import get_logger
from .types import SimplifierDefect

logger = get_logger("simplifier")


@dataclass(frozen=True)
class UndefinedSubterm:
    """A subtree whose value is undefined whatever the variables are bound to."""

    node: Expression
    code: str
    reason: str


def find_undefined(expr: Expression) -> Optional[UndefinedSubterm]:
    """Return the first provably undefined subtree of ``expr`` in pre-order.

    Only literal operands count as proof: ``x / 0`` is undefined, ``x / y`` is not.
    """
    for node in expr.walk():
        if not isinstance(node, BinaryOp):
            continue
        left, right = node.left, node.right
        if node.kind is BinOpKind.DIV and is_constant(right, 0):
            return UndefinedSubterm(node, "DIVISION_BY_ZERO", "division by zero")
        if node.kind is not BinOpKind.POW or not isinstance(right, Constant):
            continue
        if is_constant(left, 0):
            if right.value == 0:
                return UndefinedSubterm(
                    node, "ZERO_TO_ZERO_POWER", "zero raised to the zero power"
                )
            if right.value < 0:
                return UndefinedSubterm(
                    node, "ZERO_TO_NEGATIVE_POWER", "zero raised to a negative power"
                )
        if (
            isinstance(left, Constant)
            and left.value < 0
            and not arithmetic.is_integral(right.value)
        ):
            return UndefinedSubterm(
                node,
                "NEGATIVE_BASE",
                "negative base raised to a non-integer exponent",
            )
    return None


def simplify(
    expr: Expression,
    *,
    preserve: Optional[str] = None,
    commutative_normal: bool = False,
) -> Expression:
    """Simplify ``expr`` to a local fixpoint of the rule set.

    Args:
        expr: Expression to simplify
        preserve: Variable name that annihilation rules (x*0, x^0, 1^x) must
            never drop. The solver passes its target so the variable cannot
            vanish before isolation.
        commutative_normal: Rewrite a - b as a + (-b)

    Returns:
        The simplified expression (``expr`` itself if no rule fired)

    Raises:
        SimplifierDefect: If no fixpoint is reached within SIMPLIFY_MAX_PASSES
    """
    current = expr
    for pass_number in range(1, SIMPLIFY_MAX_PASSES + 1):
        rewritten = _rewrite(current, preserve, commutative_normal)
        # a pass that fires no rule returns the very same object
        if rewritten is current:
            logger.debug(f"Fixpoint reached after {pass_number} pass(es)")
            return rewritten
        current = rewritten
    logger.error(
        f"Simplifier exceeded {SIMPLIFY_MAX_PASSES} passes without a fixpoint: {expr!r}"
    )
    raise SimplifierDefect(expr, SIMPLIFY_MAX_PASSES)


def _rewrite(
    node: Expression, preserve: Optional[str], commutative_normal: bool
) -> Expression:
    """One bottom-up pass. Unchanged subtrees are returned as the same object.

    Post-order with an explicit stack, so tree depth is not bounded by the
    interpreter's recursion limit.
    """
    stack: list[tuple[Expression, bool]] = [(node, False)]
    results: list[Expression] = []
    while stack:
        current, expanded = stack.pop()
        if isinstance(current, (Constant, Variable)):
            results.append(current)
        elif not expanded and isinstance(current, (Negate, BinaryOp)):
            stack.append((current, True))
            stack.extend((child, False) for child in reversed(current.children()))
        elif isinstance(current, Negate):
            inner = results.pop()
            if inner is not current.inner:
                current = Negate(inner)
            results.append(_negate_rules(current))
        elif isinstance(current, BinaryOp):
            right = results.pop()
            left = results.pop()
            if left is not current.left or right is not current.right:
                current = BinaryOp(current.kind, left, right)
            results.append(_binary_rules(current, preserve, commutative_normal))
        else:
            raise TypeError(f"Unknown expression node: {current!r}")
    return results.pop()


def _negate_rules(node: Negate) -> Expression:
    inner = node.inner
    if isinstance(inner, Constant):
        return Constant(-inner.value)
    if isinstance(inner, Negate):
        return inner.inner
    return node


def _fold(node: BinaryOp) -> Optional[Constant]:
    operation = arithmetic.OPERATIONS[node.kind.symbol]
    try:
        value = operation(node.left.value, node.right.value, exact_only=True)
    except (ZeroDivisionError, ValueError) as e:
        logger.debug(f"Left {node!r} unfolded: {e}")
        return None
    if value is None:
        return None
    return Constant(value)


def _erasable(node: Expression, preserve: Optional[str]) -> bool:
    """Whether an annihilation rule may drop ``node`` from the tree."""
    if preserve is not None and node.contains(preserve):
        return False
    return find_undefined(node) is None


def _binary_rules(
    node: BinaryOp, preserve: Optional[str], commutative_normal: bool
) -> Expression:
    kind, left, right = node.kind, node.left, node.right

    if isinstance(left, Constant) and isinstance(right, Constant):
        folded = _fold(node)
        if folded is not None:
            return folded

    if kind is BinOpKind.ADD:
        if is_constant(right, 0):
            return left
        if is_constant(left, 0):
            return right
    elif kind is BinOpKind.SUB:
        if is_constant(right, 0):
            return left
        if commutative_normal:
            return add(left, Negate(right))
    elif kind is BinOpKind.MUL:
        if is_constant(right, 1):
            return left
        if is_constant(left, 1):
            return right
        if is_constant(right, 0) and _erasable(left, preserve):
            return right
        if is_constant(left, 0) and _erasable(right, preserve):
            return left
    elif kind is BinOpKind.DIV:
        if is_constant(right, 1):
            return left
    elif kind is BinOpKind.POW:
        if is_constant(right, 1):
            return left
        # 0^0 stays put: it is undefined, not 1
        if is_constant(right, 0) and not is_constant(left, 0) and _erasable(left, preserve):
            return Constant(1)
        if is_constant(left, 1) and _erasable(right, preserve):
            return Constant(1)
    else:
        raise TypeError(f"Unknown binary operation: {kind!r}")

    return node
