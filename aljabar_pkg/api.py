"""Public API for Aljabar - returns structured objects instead of raising on bad input."""

from __future__ import annotations

from collections.abc import Mapping

from .arithmetic import Number
from .config import MAX_EXPRESSION_DEPTH, MAX_EXPRESSION_NODES, VERIFY_DEFAULT_VALUE
from .equation import Equation
from .evaluator import evaluate
from .expression import Expression
from .logging_config import get_logger
from .simplifier import simplify
from .solver import solve, verify_solution
from .types import (
    AljabarError,
    ConstructionError,
    DomainViolation,
    EvalError,
    EvalResult,
    SimplifyResult,
    Solved,
    SolveResult,
    ValidationError,
)

logger = get_logger("api")


def _check_limits(expr: Expression) -> None:
    """Raise ValidationError if ``expr`` exceeds the configured size or depth."""
    if not isinstance(expr, Expression):
        raise ValidationError(
            f"Expected an Expression, got {type(expr).__name__}", "NOT_AN_EXPRESSION"
        )
    node_count = 0
    stack = [(expr, 1)]
    while stack:
        node, depth = stack.pop()
        node_count += 1
        if node_count > MAX_EXPRESSION_NODES:
            raise ValidationError(
                f"Expression too complex (>{MAX_EXPRESSION_NODES} nodes)", "TOO_COMPLEX"
            )
        if depth > MAX_EXPRESSION_DEPTH:
            raise ValidationError(
                f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)",
                "TOO_DEEP",
            )
        stack.extend((child, depth + 1) for child in node.children())


def validate_expression(expr: Expression) -> tuple[bool, str | None]:
    """Check an expression against the configured limits without evaluating it.

    Args:
        expr: Expression to validate

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from aljabar_pkg.api import validate_expression
        >>> from aljabar_pkg.expression import var
        >>> validate_expression(var("x") + 1)
        (True, None)
    """
    try:
        _check_limits(expr)
        return True, None
    except ValidationError as e:
        return False, str(e)


def evaluate_expression(
    expr: Expression, bindings: Mapping[str, Number] | None = None
) -> EvalResult:
    """Evaluate an expression.

    Args:
        expr: Expression to evaluate
        bindings: Values for the free variables

    Returns:
        EvalResult with the value, or the error message and code

    Example:
        >>> from aljabar_pkg.api import evaluate_expression
        >>> from aljabar_pkg.expression import var
        >>> evaluate_expression(var("x") * 2, {"x": 4}).value
        8
    """
    try:
        _check_limits(expr)
        value = evaluate(expr, bindings)
    except AljabarError as e:
        return EvalResult(ok=False, error=str(e), error_code=e.code)
    except TypeError as e:
        return EvalResult(ok=False, error=f"Type error: {e}", error_code="TYPE_ERROR")
    return EvalResult(ok=True, value=value)


def simplify_expression(expr: Expression) -> SimplifyResult:
    """Simplify an expression.

    Returns:
        SimplifyResult with the simplified tree
    """
    try:
        _check_limits(expr)
    except ValidationError as e:
        return SimplifyResult(ok=False, error=str(e), error_code=e.code)
    return SimplifyResult(ok=True, expression=simplify(expr))


def solve_equation(
    equation: Equation,
    target: str,
    *,
    commutative_normal: bool = False,
    verify: bool = False,
) -> SolveResult:
    """Solve an equation for one variable.

    Args:
        equation: Equation to solve
        target: Variable to isolate
        commutative_normal: Rewrite a - b as a + (-b) before isolating
        verify: Substitute the solution back in, binding every other free
            variable to VERIFY_DEFAULT_VALUE, and reject it if the sides differ

    Returns:
        Solved, NoUniqueSolution or DomainViolation. Inputs over the size limits
        are reported as DomainViolation with code TOO_COMPLEX or TOO_DEEP.

    Example:
        >>> from aljabar_pkg.api import solve_equation
        >>> from aljabar_pkg.equation import Equation
        >>> from aljabar_pkg.expression import const, var
        >>> solve_equation(Equation(var("x") + 3, const(10)), "x").value
        BinaryOp(SUB, Constant(10), Constant(3))
    """
    try:
        if not isinstance(equation, Equation):
            raise TypeError(f"Expected an Equation, got {type(equation).__name__}")
        _check_limits(equation.lhs)
        _check_limits(equation.rhs)
        result = solve(equation, target, commutative_normal=commutative_normal)
    except ValidationError as e:
        logger.warning(f"Rejected equation for {target}: {e.code} - {e.message}")
        return DomainViolation(str(target), str(e), e.code)
    except (TypeError, ConstructionError) as e:
        logger.warning(f"Invalid solve request: {e}")
        return DomainViolation(str(target), str(e), "INVALID_INPUT")

    if not isinstance(result, Solved):
        logger.info(f"No solution for {target}: {result!r}")
        return result
    if not verify:
        return result

    bindings = {
        name: VERIFY_DEFAULT_VALUE
        for name in equation.free_variables()
        if name != target
    }
    try:
        consistent = verify_solution(equation, target, result.value, bindings)
    except EvalError as e:
        logger.warning(f"Solution for {target} cannot be substituted back: {e}")
        return DomainViolation(
            target, f"solution cannot be evaluated: {e}", "VERIFICATION_FAILED", result.value
        )
    if not consistent:
        logger.warning(f"Solution for {target} does not satisfy {equation!r}")
        return DomainViolation(
            target,
            "solution does not satisfy the equation",
            "VERIFICATION_FAILED",
            result.value,
        )
    return result
