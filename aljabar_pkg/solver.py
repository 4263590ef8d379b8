"""Single-variable equation solving by isolation.

This module provides:
- ``solve``: isolate one occurrence of a variable by peeling the operations
  around it and applying their inverses to the other side
- ``verify_solution``: substitute a solved value back into an equation

The solver walks ``NORMALIZING -> SCANNING -> ISOLATING -> DONE``. Any state
can end in a failure, and failures are final. Failures are returned as
``NoUniqueSolution`` or ``DomainViolation`` values, never raised: an equation
that cannot be solved is an ordinary outcome.

Domain checks are a best-effort static guard. Zero tests only fire when the
operand has collapsed to a literal; sign tests also evaluate variable-free
operands such as ``-(2^(1/2))``. Anything involving other variables is passed
through and left for the evaluator to reject at substitution time.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from fractions import Fraction
from typing import Optional

from .arithmetic import Number, is_integral
from .config import VERIFY_ABSOLUTE_TOLERANCE, VERIFY_RELATIVE_TOLERANCE
from .equation import Equation
from .evaluator import evaluate
from .expression import (
    BinaryOp,
    BinOpKind,
    Constant,
    Expression,
    Negate,
    Variable,
    add,
    div,
    mul,
    power,
    sub,
)
from .logging_config import get_logger
from .simplifier import find_undefined, simplify
from .types import (
    DomainViolation,
    EvalError,
    NoUniqueSolution,
    PeelStep,
    Solved,
    SolveResult,
)

logger = get_logger("solver")


class SolveState(Enum):
    NORMALIZING = "normalizing"
    SCANNING = "scanning"
    ISOLATING = "isolating"
    DONE = "done"


class _IsolationFailure(Exception):
    """Internal signal from a peel step; converted to DomainViolation by solve()."""

    def __init__(self, code: str, reason: str, node: Expression):
        self.code = code
        self.reason = reason
        self.node = node
        super().__init__(reason)


def _constant_value(expr: Expression) -> Optional[Number]:
    """The literal value of ``expr`` after simplification, or None if it is symbolic."""
    simplified = simplify(expr)
    if isinstance(simplified, Constant):
        return simplified.value
    return None


def _numeric_value(expr: Expression) -> Optional[Number]:
    """Like _constant_value, but falls back to evaluating variable-free trees.

    Irrational constants such as ``2^(1/2)`` stay unfolded under simplify(),
    so their sign is only visible numerically. Used for sign tests, never
    for zero tests.
    """
    value = _constant_value(expr)
    if value is not None or expr.free_variables():
        return value
    try:
        return evaluate(expr)
    except EvalError:
        return None


def _root_of_negative(exponent: Number) -> tuple[str, str]:
    """Failure code and reason for ``hot ^ exponent = <negative>``."""
    if is_integral(exponent):
        parity = int(exponent) % 2
        if parity == 0:
            return "EVEN_ROOT_OF_NEGATIVE", f"even power ({exponent}) cannot be negative"
        return (
            "NEGATIVE_BASE",
            f"the real {abs(int(exponent))}th root of a negative value is not defined",
        )
    if Fraction(exponent).denominator % 2 == 0:
        return (
            "EVEN_ROOT_OF_NEGATIVE",
            f"principal even root (exponent {exponent}) cannot be negative",
        )
    return (
        "NEGATIVE_BASE",
        f"a non-integer power ({exponent}) of a real base cannot be negative",
    )


def _peel(
    node: Expression, accumulator: Expression, target: str
) -> tuple[Expression, Expression, PeelStep]:
    """Remove the outermost operation around ``target``.

    Returns:
        Tuple of (hot child, new accumulator, step record)

    Raises:
        _IsolationFailure: If the inverse operation is undefined
    """
    if isinstance(node, Negate):
        inverted = Negate(accumulator)
        return node.inner, inverted, PeelStep("neg", "inner", inverted)

    if not isinstance(node, BinaryOp):
        raise TypeError(f"Cannot peel expression node: {node!r}")

    hot_left = node.left.contains(target)
    hot, cold = (node.left, node.right) if hot_left else (node.right, node.left)
    position = "left" if hot_left else "right"
    kind = node.kind

    if kind is BinOpKind.ADD:
        inverted = sub(accumulator, cold)
    elif kind is BinOpKind.SUB:
        # hot - cold = acc  ->  hot = acc + cold
        # cold - hot = acc  ->  hot = -(acc - cold)
        inverted = add(accumulator, cold) if hot_left else Negate(sub(accumulator, cold))
    elif kind is BinOpKind.MUL:
        if _constant_value(cold) == 0:
            raise _IsolationFailure(
                "DIVISION_BY_ZERO", "cannot divide by a factor that is zero", node
            )
        inverted = div(accumulator, cold)
    elif kind is BinOpKind.DIV:
        if hot_left:
            if _constant_value(cold) == 0:
                raise _IsolationFailure(
                    "DIVISION_BY_ZERO", "denominator is zero", node
                )
            inverted = mul(accumulator, cold)
        else:
            # cold / hot = 0 has no solution for finite hot
            if _constant_value(accumulator) == 0:
                raise _IsolationFailure(
                    "DIVISION_BY_ZERO",
                    "isolating the denominator would divide by zero",
                    node,
                )
            # 0 / hot is 0 or undefined, never another value
            if _constant_value(cold) == 0:
                raise _IsolationFailure(
                    "DIVISION_BY_ZERO",
                    "zero numerator: the only candidate denominator is zero",
                    node,
                )
            inverted = div(cold, accumulator)
    elif kind is BinOpKind.POW:
        if not hot_left:
            raise _IsolationFailure(
                "VARIABLE_EXPONENT", "unsupported: variable exponent", node
            )
        exponent = _numeric_value(cold)
        value = _numeric_value(accumulator)
        if exponent is not None:
            if exponent == 0:
                raise _IsolationFailure(
                    "ZERO_EXPONENT", "cannot take the zeroth root", node
                )
            # hot ^ e < 0 needs a negative hot and an odd integer e, and the
            # inverse acc ^ (1/e) is only real for a negative acc when e = +-1
            if value is not None and value < 0 and exponent not in (1, -1):
                code, reason = _root_of_negative(exponent)
                raise _IsolationFailure(code, reason, node)
            if value is not None and value == 0 and exponent < 0:
                raise _IsolationFailure(
                    "ZERO_TO_NEGATIVE_POWER",
                    "zero raised to a negative power",
                    node,
                )
        inverted = power(accumulator, div(Constant(1), cold))
    else:
        raise TypeError(f"Unknown binary operation: {kind!r}")

    return hot, inverted, PeelStep(kind.symbol, position, inverted)


def solve(
    equation: Equation, target: str, *, commutative_normal: bool = False
) -> SolveResult:
    """Solve ``equation`` for the variable named ``target``.

    Args:
        equation: The equation to solve
        target: Name of the variable to isolate
        commutative_normal: Normalize a - b to a + (-b) before isolating

    Returns:
        Solved with the closed form (the last peel's accumulator, unsimplified),
        NoUniqueSolution if ``target`` occurs zero or several times, or
        DomainViolation if an isolation step is undefined

    Raises:
        TypeError: If ``equation`` is not an Equation
        InvalidVariableNameError: If ``target`` is not an identifier
    """
    if not isinstance(equation, Equation):
        raise TypeError(f"solve() expects an Equation, got {equation!r}")
    Variable(target)

    state = SolveState.NORMALIZING
    logger.debug(f"[{state.value}] solving {equation!r} for {target}")
    lhs = simplify(equation.lhs, preserve=target, commutative_normal=commutative_normal)
    rhs = simplify(equation.rhs, preserve=target, commutative_normal=commutative_normal)
    for side in (lhs, rhs):
        undefined = find_undefined(side)
        if undefined is not None:
            logger.debug(f"[{state.value}] undefined subterm {undefined.node!r}")
            return DomainViolation(target, undefined.reason, undefined.code, undefined.node)

    state = SolveState.SCANNING
    occurrences = lhs.count_occurrences(target) + rhs.count_occurrences(target)
    logger.debug(f"[{state.value}] {target} occurs {occurrences} time(s)")
    if occurrences != 1:
        return NoUniqueSolution(target, occurrences)

    state = SolveState.ISOLATING
    if lhs.contains(target):
        variable_side, accumulator = lhs, rhs
    else:
        variable_side, accumulator = rhs, lhs
    steps: list[PeelStep] = []
    while not isinstance(variable_side, Variable):
        if steps:
            accumulator = simplify(accumulator, commutative_normal=commutative_normal)
        try:
            variable_side, accumulator, step = _peel(variable_side, accumulator, target)
        except _IsolationFailure as failure:
            logger.debug(f"[{state.value}] {failure.code}: {failure.reason}")
            return DomainViolation(target, failure.reason, failure.code, failure.node)
        logger.debug(f"[{state.value}] peeled {step.operation} ({step.hot_position})")
        steps.append(step)

    state = SolveState.DONE
    undefined = find_undefined(simplify(accumulator))
    if undefined is not None:
        logger.debug(f"[{state.value}] solution is undefined: {undefined.reason}")
        return DomainViolation(target, undefined.reason, undefined.code, undefined.node)
    logger.debug(f"[{state.value}] {target} = {accumulator!r}")
    return Solved(target, accumulator, tuple(steps))


def verify_solution(
    equation: Equation,
    target: str,
    value: Expression,
    bindings: Mapping[str, Number] | None = None,
    *,
    rel_tol: float = VERIFY_RELATIVE_TOLERANCE,
    abs_tol: float = VERIFY_ABSOLUTE_TOLERANCE,
) -> bool:
    """Check that ``target = value`` satisfies ``equation``.

    ``value`` is evaluated under ``bindings`` (values for every other free
    variable), then both sides are evaluated with ``target`` bound to it.

    Raises:
        EvalError: If the solution or either side cannot be evaluated
    """
    bindings = dict(bindings or {})
    solution = evaluate(value, bindings)
    bound = {**bindings, target: solution}
    left = evaluate(equation.lhs, bound)
    right = evaluate(equation.rhs, bound)
    if left == right:
        return True
    try:
        return math.isclose(float(left), float(right), rel_tol=rel_tol, abs_tol=abs_tol)
    except OverflowError:
        return False
