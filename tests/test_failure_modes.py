"""Tests for failure modes, resource limits, and invalid input handling."""

import logging

import pytest

from aljabar_pkg import simplifier
from aljabar_pkg.api import evaluate_expression, solve_equation
from aljabar_pkg.equation import Equation
from aljabar_pkg.expression import BinaryOp, BinOpKind, Constant, add, const, neg, var
from aljabar_pkg.simplifier import simplify
from aljabar_pkg.solver import solve
from aljabar_pkg.types import DomainViolation, NonFiniteConstantError, SimplifierDefect


class TestConstructionFailures:
    """Invalid trees cannot be built at all."""

    def test_infinite_constant(self):
        with pytest.raises(NonFiniteConstantError):
            Constant(float("inf"))

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            BinOpKind("%")

    def test_operator_as_string(self):
        with pytest.raises(TypeError):
            BinaryOp("+", const(1), const(2))


class TestSolverFailures:
    """Unsolvable equations are returned, never raised."""

    def test_failures_are_values(self):
        x = var("x")
        for equation in (
            Equation(add(x, x), const(1)),
            Equation(const(1), const(2)),
            Equation(neg(x), BinaryOp(BinOpKind.DIV, const(1), const(0))),
        ):
            result = solve(equation, "x")
            assert result.ok is False

    def test_api_converts_bad_input(self):
        result = solve_equation(Equation(var("x"), const(1)), "")
        assert isinstance(result, DomainViolation)
        assert result.code == "INVALID_INPUT"


class TestSimplifierDefect:
    """Exceeding the pass cap is a defect, not a user error."""

    def test_defect_propagates_through_solver(self, monkeypatch):
        monkeypatch.setattr(simplifier, "SIMPLIFY_MAX_PASSES", 1)
        with pytest.raises(SimplifierDefect):
            solve(Equation(add(var("x"), const(0)), const(1)), "x")

    def test_defect_is_logged(self, monkeypatch, caplog):
        monkeypatch.setattr(simplifier, "SIMPLIFY_MAX_PASSES", 1)
        with caplog.at_level(logging.ERROR, logger="aljabar.simplifier"):
            with pytest.raises(SimplifierDefect):
                simplify(add(var("x"), const(0)))
        assert "without a fixpoint" in caplog.text


class TestLogging:
    def test_non_solution_logged_at_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="aljabar.api"):
            solve_equation(Equation(add(var("x"), var("x")), const(1)), "x")
        assert "No solution for x" in caplog.text

    def test_rejection_logged_at_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="aljabar.api"):
            solve_equation("x = 1", "x")
        assert "Invalid solve request" in caplog.text


class TestEdgeCases:
    def test_zero_expression(self):
        result = evaluate_expression(const(0))
        assert result.ok is True
        assert result.value == 0

    def test_negative_numbers(self):
        assert simplify(neg(const(-5))) == const(5)

    def test_very_small_numbers(self):
        result = evaluate_expression(add(const(1e-300), const(1e-300)))
        assert result.ok is True
        assert result.value == pytest.approx(2e-300)

    def test_very_large_numbers(self):
        result = evaluate_expression(add(const(10**400), const(1)))
        assert result.ok is True
        assert result.value == 10**400 + 1

    def test_float_overflow_reported(self):
        result = evaluate_expression(
            BinaryOp(BinOpKind.MUL, const(1e308), const(1e308))
        )
        assert result.ok is False
        assert result.error_code == "OVERFLOW"
