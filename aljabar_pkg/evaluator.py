"""Numeric evaluation of expressions under variable bindings."""

from __future__ import annotations

from collections.abc import Mapping

from . import arithmetic
from .arithmetic import Number
from .expression import BinaryOp, Constant, Expression, Negate, Variable
from .logging_config import get_logger
from .types import (
    DivisionByZeroError,
    EvalDomainError,
    UndefinedVariableError,
)

logger = get_logger("evaluator")


def evaluate(expr: Expression, bindings: Mapping[str, Number] | None = None) -> Number:
    """Reduce ``expr`` to a single number.

    Exact inputs (int/Fraction constants and bindings) give exact results;
    irrational powers and anything touching a float give a float.

    Args:
        expr: Expression to evaluate
        bindings: Variable name to value mapping

    Returns:
        The value as int, Fraction or float

    Raises:
        UndefinedVariableError: A variable has no binding
        DivisionByZeroError: A divisor evaluates to exactly zero
        EvalDomainError: 0^0, zero to a negative power, a negative base with a
            non-integer exponent, a non-finite result, or a non-finite binding
    """
    bindings = bindings or {}
    for name, value in bindings.items():
        if not arithmetic.is_number(value):
            raise TypeError(f"Binding for '{name}' must be a number, got {value!r}")
        if not arithmetic.is_finite(value):
            raise EvalDomainError(
                None, f"Binding for '{name}' is not finite", "NON_FINITE_BINDING"
            )
    return _evaluate(expr, bindings)


def _evaluate(node: Expression, bindings: Mapping[str, Number]) -> Number:
    if isinstance(node, Constant):
        return node.value
    if isinstance(node, Variable):
        if node.name not in bindings:
            raise UndefinedVariableError(node.name)
        return arithmetic.normalize(bindings[node.name])
    if isinstance(node, Negate):
        return -_evaluate(node.inner, bindings)
    if isinstance(node, BinaryOp):
        left = _evaluate(node.left, bindings)
        right = _evaluate(node.right, bindings)
        operation = arithmetic.OPERATIONS[node.kind.symbol]
        try:
            return operation(left, right)
        except ZeroDivisionError as e:
            logger.debug(f"Division by zero evaluating {node!r}")
            raise DivisionByZeroError(node) from e
        except arithmetic.NonFiniteResult as e:
            raise EvalDomainError(node, str(e), "OVERFLOW") from e
        except ValueError as e:
            raise EvalDomainError(node, str(e), "POWER_DOMAIN") from e
    raise TypeError(f"Unknown expression node: {node!r}")
