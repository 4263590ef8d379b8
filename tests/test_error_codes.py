"""Test error codes carried by exceptions and result values."""

import unittest

from aljabar_pkg.equation import Equation
from aljabar_pkg.evaluator import evaluate
from aljabar_pkg.expression import Constant, Variable, const, div, mul, power, var
from aljabar_pkg.solver import solve
from aljabar_pkg.types import (
    AljabarError,
    DivisionByZeroError,
    EvalDomainError,
    InvalidVariableNameError,
    NonFiniteConstantError,
    UndefinedVariableError,
    ValidationError,
)


class TestErrorCodes(unittest.TestCase):
    """Test that failures report the expected error code."""

    def test_non_finite_constant_error_code(self):
        try:
            Constant(float("nan"))
            self.fail("Should have raised NonFiniteConstantError")
        except NonFiniteConstantError as e:
            self.assertEqual(
                e.code, "NON_FINITE_CONSTANT", f"Expected NON_FINITE_CONSTANT, got {e.code}"
            )
            self.assertIn("finite", str(e))

    def test_invalid_variable_name_error_code(self):
        with self.assertRaises(InvalidVariableNameError) as ctx:
            Variable("2x")
        self.assertEqual(ctx.exception.code, "INVALID_VARIABLE_NAME")
        self.assertIn("2x", str(ctx.exception))

    def test_undefined_variable_error_code(self):
        with self.assertRaises(UndefinedVariableError) as ctx:
            evaluate(var("q"))
        self.assertEqual(ctx.exception.code, "UNDEFINED_VARIABLE")
        self.assertIn("'q'", str(ctx.exception))

    def test_division_by_zero_error_code(self):
        with self.assertRaises(DivisionByZeroError) as ctx:
            evaluate(div(const(1), const(0)))
        self.assertEqual(ctx.exception.code, "DIVISION_BY_ZERO")

    def test_power_domain_error_code(self):
        with self.assertRaises(EvalDomainError) as ctx:
            evaluate(power(const(0), const(0)))
        self.assertEqual(ctx.exception.code, "POWER_DOMAIN")

    def test_validation_error_default_code(self):
        error = ValidationError("bad input")
        self.assertEqual(error.code, "VALIDATION_ERROR")
        self.assertEqual(str(error), "bad input")

    def test_custom_code_overrides_default(self):
        error = AljabarError("boom", "CUSTOM")
        self.assertEqual(error.code, "CUSTOM")
        self.assertEqual(AljabarError("boom").code, "ALJABAR_ERROR")

    def test_domain_violation_codes(self):
        """Each isolation failure names its cause."""
        x = var("x")
        cases = [
            (Equation(mul(x, const(0)), const(5)), "DIVISION_BY_ZERO"),
            (Equation(power(x, const(2)), const(-4)), "EVEN_ROOT_OF_NEGATIVE"),
            (Equation(power(const(3), x), const(9)), "VARIABLE_EXPONENT"),
            (Equation(power(x, const(0)), const(1)), "ZERO_EXPONENT"),
            (Equation(power(x, const(-2)), const(0)), "ZERO_TO_NEGATIVE_POWER"),
            (Equation(x, power(const(0), const(0))), "ZERO_TO_ZERO_POWER"),
            (Equation(power(x, const(5)), const(-32)), "NEGATIVE_BASE"),
            (Equation(power(x, div(const(1), const(4))), const(-2)), "EVEN_ROOT_OF_NEGATIVE"),
            (Equation(div(const(0), x), const(5)), "DIVISION_BY_ZERO"),
        ]
        for equation, code in cases:
            with self.subTest(code=code):
                result = solve(equation, "x")
                self.assertEqual(result.code, code)
                self.assertEqual(result.to_dict()["code"], code)


if __name__ == "__main__":
    unittest.main()
