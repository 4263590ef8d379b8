"""Test that API functions return typed dataclasses."""

from fractions import Fraction

from aljabar_pkg import api
from aljabar_pkg.api import (
    evaluate_expression,
    simplify_expression,
    solve_equation,
    validate_expression,
)
from aljabar_pkg.equation import Equation
from aljabar_pkg.expression import add, const, div, mul, neg, power, sub, var
from aljabar_pkg.types import (
    DomainViolation,
    EvalResult,
    NoUniqueSolution,
    SimplifyResult,
    Solved,
    SolveResult,
)

x, y = var("x"), var("y")


def _deep(levels):
    expr = x
    for _ in range(levels):
        expr = neg(expr)
    return expr


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_evaluate_returns_eval_result(self):
        """Test that evaluate_expression() returns EvalResult."""
        result = evaluate_expression(add(x, const(2)), {"x": 2})
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert result.value == 4

    def test_evaluate_error_returns_eval_result(self):
        """Test that evaluation errors come back as EvalResult."""
        result = evaluate_expression(add(x, y), {"x": 1})
        assert isinstance(result, EvalResult)
        assert result.ok is False
        assert result.error_code == "UNDEFINED_VARIABLE"
        assert result.error is not None

    def test_evaluate_division_by_zero(self):
        result = evaluate_expression(div(const(1), sub(x, x)), {"x": 3})
        assert result.ok is False
        assert result.error_code == "DIVISION_BY_ZERO"

    def test_evaluate_rejects_non_expression(self):
        result = evaluate_expression("2 + 2")
        assert result.ok is False
        assert result.error_code == "NOT_AN_EXPRESSION"

    def test_evaluate_bad_binding_type(self):
        result = evaluate_expression(x, {"x": "2"})
        assert result.ok is False
        assert result.error_code == "TYPE_ERROR"

    def test_simplify_returns_simplify_result(self):
        result = simplify_expression(mul(add(x, const(0)), const(1)))
        assert isinstance(result, SimplifyResult)
        assert result.ok is True
        assert result.expression == x

    def test_solve_equation_returns_solve_result(self):
        """Test that solve_equation() returns SolveResult."""
        result = solve_equation(Equation(add(x, const(3)), const(10)), "x")
        assert isinstance(result, SolveResult)
        assert isinstance(result, Solved)
        assert result.ok is True
        assert result.result_type == "solved"
        assert result.value == sub(const(10), const(3))

    def test_solve_equation_no_unique_solution(self):
        result = solve_equation(Equation(add(x, x), const(4)), "x")
        assert isinstance(result, NoUniqueSolution)
        assert result.ok is False
        assert result.result_type == "no_unique_solution"

    def test_solve_equation_invalid_input(self):
        result = solve_equation("x = 1", "x")
        assert isinstance(result, DomainViolation)
        assert result.code == "INVALID_INPUT"

        result = solve_equation(Equation(x, const(1)), "1x")
        assert isinstance(result, DomainViolation)
        assert result.code == "INVALID_INPUT"

    def test_to_dict_serializable(self):
        result = evaluate_expression(div(const(1), const(3)))
        assert result.to_dict() == {"ok": True, "value": "1/3"}
        data = solve_equation(Equation(x, const(5)), "x").to_dict()
        assert data["ok"] is True
        assert data["value"] == {"type": "constant", "value": 5}


class TestAPIVerification:
    """Test solve_equation(verify=True)."""

    def test_verified_solution(self):
        result = solve_equation(
            Equation(div(add(mul(const(2), x), const(3)), const(4)), const(5)),
            "x",
            verify=True,
        )
        assert isinstance(result, Solved)

    def test_verified_with_other_variables(self):
        result = solve_equation(Equation(power(x, const(3)), y), "x", verify=True)
        assert isinstance(result, Solved)

    def test_unevaluable_solution_rejected(self):
        # y is bound to 1.5 during verification, so sqrt(y - 2) is undefined
        result = solve_equation(
            Equation(power(x, const(2)), sub(y, const(2))), "x", verify=True
        )
        assert isinstance(result, DomainViolation)
        assert result.code == "VERIFICATION_FAILED"
        assert result.node == power(sub(y, const(2)), div(const(1), const(2)))

    def test_verify_off_by_default(self):
        result = solve_equation(Equation(power(x, const(2)), sub(y, const(2))), "x")
        assert isinstance(result, Solved)


class TestAPILimits:
    """Test the size and depth limits applied at the API boundary."""

    def test_validate_accepts_normal_expression(self):
        assert validate_expression(add(x, const(Fraction(1, 2)))) == (True, None)

    def test_too_deep(self):
        is_valid, error = validate_expression(_deep(150))
        assert is_valid is False
        assert "too deeply nested" in error

        result = solve_equation(Equation(_deep(150), const(1)), "x")
        assert isinstance(result, DomainViolation)
        assert result.code == "TOO_DEEP"

    def test_too_complex(self, monkeypatch):
        monkeypatch.setattr(api, "MAX_EXPRESSION_NODES", 3)
        is_valid, error = validate_expression(add(x, add(y, const(1))))
        assert is_valid is False
        assert "too complex" in error

        result = simplify_expression(add(x, add(y, const(1))))
        assert result.ok is False
        assert result.error_code == "TOO_COMPLEX"

    def test_not_an_expression(self):
        is_valid, error = validate_expression(42)
        assert is_valid is False
        assert "Expected an Expression" in error
