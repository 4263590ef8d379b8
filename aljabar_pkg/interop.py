"""Conversion between Aljabar expressions and SymPy expressions.

``to_sympy`` lets callers hand results to the wider SymPy toolbox (printing,
numeric approximation, further algebra). ``from_sympy`` accepts the subset of
SymPy that maps onto the node types here: sums, products, powers, rationals,
floats and symbols.
"""

from __future__ import annotations

from fractions import Fraction

import sympy as sp

from .arithmetic import is_number
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
from .types import NonFiniteConstantError, ValidationError

_NON_FINITE = (sp.S.NaN, sp.S.ComplexInfinity, sp.S.Infinity, sp.S.NegativeInfinity)


def to_sympy(expr: Expression) -> sp.Expr:
    """Convert an expression to an (automatically evaluated) SymPy expression."""
    if isinstance(expr, Constant):
        value = expr.value
        if isinstance(value, Fraction):
            return sp.Rational(value.numerator, value.denominator)
        if isinstance(value, int):
            return sp.Integer(value)
        return sp.Float(value)
    if isinstance(expr, Variable):
        return sp.Symbol(expr.name)
    if isinstance(expr, Negate):
        return -to_sympy(expr.inner)
    if isinstance(expr, BinaryOp):
        left, right = to_sympy(expr.left), to_sympy(expr.right)
        if expr.kind is BinOpKind.ADD:
            return left + right
        if expr.kind is BinOpKind.SUB:
            return left - right
        if expr.kind is BinOpKind.MUL:
            return left * right
        if expr.kind is BinOpKind.DIV:
            return left / right
        if expr.kind is BinOpKind.POW:
            return left**right
        raise TypeError(f"Unknown binary operation: {expr.kind!r}")
    raise TypeError(f"Unknown expression node: {expr!r}")


def from_sympy(expr: sp.Basic) -> Expression:
    """Convert a SymPy expression into an Aljabar expression tree.

    n-ary sums and products become left-nested binary nodes; negative terms
    become subtractions, ``-1 * a`` becomes a negation and ``a ** -1`` factors
    become divisions.

    Raises:
        NonFiniteConstantError: For oo, -oo, zoo or nan
        ValidationError: For nodes with no counterpart (functions, I, relations...)
    """
    if is_number(expr):
        return Constant(expr)
    if not isinstance(expr, sp.Basic):
        raise TypeError(f"Expected a SymPy expression, got {expr!r}")

    if any(expr is special for special in _NON_FINITE):
        raise NonFiniteConstantError(expr)
    if isinstance(expr, sp.Integer):
        return Constant(int(expr))
    if isinstance(expr, sp.Rational):
        return Constant(Fraction(int(expr.p), int(expr.q)))
    if isinstance(expr, sp.Float):
        return Constant(float(expr))
    if isinstance(expr, sp.Symbol):
        return Variable(expr.name)
    if isinstance(expr, sp.Add):
        terms = expr.args
        result = from_sympy(terms[0])
        for term in terms[1:]:
            if term.could_extract_minus_sign():
                result = sub(result, from_sympy(-term))
            else:
                result = add(result, from_sympy(term))
        return result
    if isinstance(expr, sp.Mul):
        coefficient, rest = expr.as_coeff_Mul()
        if coefficient == -1:
            return Negate(from_sympy(rest))
        numerator: Expression | None = None
        denominators: list[Expression] = []
        for factor in expr.args:
            if isinstance(factor, sp.Pow) and factor.exp == -1:
                denominators.append(from_sympy(factor.base))
                continue
            converted = from_sympy(factor)
            numerator = converted if numerator is None else mul(numerator, converted)
        result = numerator if numerator is not None else Constant(1)
        for denominator in denominators:
            result = div(result, denominator)
        return result
    if isinstance(expr, sp.Pow):
        base, exponent = expr.args
        if exponent == -1:
            return div(Constant(1), from_sympy(base))
        return power(from_sympy(base), from_sympy(exponent))
    raise ValidationError(
        f"Unsupported SymPy node: {type(expr).__name__}", "UNSUPPORTED_NODE"
    )
