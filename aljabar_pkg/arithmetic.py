"""Exact numeric helpers shared by the simplifier and the evaluator.

Numbers are ``int``, ``fractions.Fraction`` or finite ``float``. Operations on
``int``/``Fraction`` operands stay exact; any ``float`` operand makes the result
a float. Every operation takes ``(left, right, exact_only=False)`` so callers
can dispatch through ``OPERATIONS`` by operator symbol.

Failures are reported with built-in exceptions: ``ZeroDivisionError`` for a
zero divisor, ``ValueError`` for every other undefined result. A result that
overflows raises ``NonFiniteResult``, a ``ValueError`` subclass.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Callable, Optional, Union

from sympy import integer_nthroot

from .config import MAX_EXACT_EXPONENT

Number = Union[int, Fraction, float]


class NonFiniteResult(ValueError):
    """An operation on finite operands produced infinity or NaN."""


def is_number(value: object) -> bool:
    return isinstance(value, (int, Fraction, float)) and not isinstance(value, bool)


def is_exact(value: Number) -> bool:
    return isinstance(value, (int, Fraction))


def is_finite(value: Number) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    return True


def is_integral(value: Number) -> bool:
    if isinstance(value, int):
        return True
    if isinstance(value, Fraction):
        return value.denominator == 1
    return value.is_integer()


def normalize(value: Number) -> Number:
    """Collapse a whole-number Fraction to int."""
    if isinstance(value, Fraction) and value.denominator == 1:
        return value.numerator
    return value


def to_json(value: Number) -> Union[int, float, str]:
    """Render a number for JSON; fractions become ``"p/q"`` strings."""
    if isinstance(value, Fraction):
        return f"{value.numerator}/{value.denominator}"
    return value


def _checked(value: Number) -> Number:
    if not is_finite(value):
        raise NonFiniteResult("result is not finite")
    return normalize(value)


def _as_float(value: Number) -> float:
    try:
        return float(value)
    except OverflowError as e:
        raise NonFiniteResult("value too large for floating point") from e


def exact_root(value: Number, degree: int) -> Optional[Number]:
    """Return the exact non-negative ``degree``-th root of a rational, or None.

    ``exact_root(Fraction(4, 9), 2) == Fraction(2, 3)``; ``exact_root(2, 2) is None``.
    """
    if not is_exact(value) or value < 0 or degree < 1:
        return None
    value = Fraction(value)
    numerator, num_exact = integer_nthroot(value.numerator, degree)
    if not num_exact:
        return None
    denominator, den_exact = integer_nthroot(value.denominator, degree)
    if not den_exact:
        return None
    return normalize(Fraction(int(numerator), int(denominator)))


def add(left: Number, right: Number, exact_only: bool = False) -> Number:
    try:
        return _checked(left + right)
    except OverflowError as e:
        raise NonFiniteResult("result is not finite") from e


def subtract(left: Number, right: Number, exact_only: bool = False) -> Number:
    try:
        return _checked(left - right)
    except OverflowError as e:
        raise NonFiniteResult("result is not finite") from e


def multiply(left: Number, right: Number, exact_only: bool = False) -> Number:
    try:
        return _checked(left * right)
    except OverflowError as e:
        raise NonFiniteResult("result is not finite") from e


def divide(left: Number, right: Number, exact_only: bool = False) -> Number:
    if right == 0:
        raise ZeroDivisionError("division by zero")
    try:
        if is_exact(left) and is_exact(right):
            return normalize(Fraction(left) / Fraction(right))
        return _checked(left / right)
    except OverflowError as e:
        raise NonFiniteResult("result is not finite") from e


def _float_power(base: Number, exponent: Number) -> float:
    try:
        result = _as_float(base) ** _as_float(exponent)
    except OverflowError as e:
        raise NonFiniteResult("result is not finite") from e
    if isinstance(result, complex) or not math.isfinite(result):
        raise NonFiniteResult("result is not finite")
    return result


def power(base: Number, exponent: Number, exact_only: bool = False) -> Optional[Number]:
    """Raise ``base`` to ``exponent`` over the reals.

    With ``exact_only`` set, exact operands whose power has no exact rational
    value (``2 ** (1/2)``) or whose exponent exceeds ``MAX_EXACT_EXPONENT``
    return None instead of a float approximation.

    Raises:
        ValueError: for 0^0, zero to a negative power, a negative base with a
            non-integer exponent, or a non-finite result.
    """
    if base == 0:
        if exponent == 0:
            raise ValueError("zero raised to the zero power is undefined")
        if exponent < 0:
            raise ValueError("zero raised to a negative power is undefined")
        return 0.0 if isinstance(base, float) or isinstance(exponent, float) else 0

    exact = is_exact(base) and is_exact(exponent)

    if is_integral(exponent):
        if not exact:
            return _float_power(base, exponent)
        whole = int(exponent)
        if abs(whole) > MAX_EXACT_EXPONENT:
            if exact_only:
                return None
            return _float_power(base, whole)
        return normalize(Fraction(base) ** whole)

    if base < 0:
        raise ValueError("negative base with a non-integer exponent has no real value")

    if exact:
        exponent = Fraction(exponent)
        root = exact_root(base, exponent.denominator)
        if root is not None and abs(exponent.numerator) <= MAX_EXACT_EXPONENT:
            return normalize(Fraction(root) ** exponent.numerator)
        if exact_only:
            return None
    return _float_power(base, exponent)


OPERATIONS: dict[str, Callable[..., Optional[Number]]] = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "/": divide,
    "^": power,
}
