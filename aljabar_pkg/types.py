"""Type definitions: exception taxonomy and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import TYPE_CHECKING, Any, ClassVar

from .arithmetic import to_json

if TYPE_CHECKING:
    from .expression import Expression


class AljabarError(Exception):
    """Base class for every error raised by the engine."""

    default_code = "ALJABAR_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class DomainError(AljabarError):
    """Raised when a value lies outside the domain of an operation."""

    default_code = "DOMAIN_ERROR"


class ConstructionError(AljabarError):
    """Raised when an expression node cannot be built."""

    default_code = "CONSTRUCTION_ERROR"


class NonFiniteConstantError(ConstructionError, DomainError):
    """Raised when a constant would hold NaN or infinity."""

    default_code = "NON_FINITE_CONSTANT"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Constant must be finite, got {value!r}")


class InvalidVariableNameError(ConstructionError):
    """Raised when a variable name is not an identifier."""

    default_code = "INVALID_VARIABLE_NAME"

    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"Invalid variable name: {name!r}")


class EvalError(AljabarError):
    """Raised by the evaluator; never by simplify or solve."""

    default_code = "EVAL_ERROR"


class UndefinedVariableError(EvalError):
    """Raised when an expression references a variable with no binding."""

    default_code = "UNDEFINED_VARIABLE"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No value bound for variable '{name}'")


class DivisionByZeroError(EvalError):
    """Raised when a divisor evaluates to exactly zero."""

    default_code = "DIVISION_BY_ZERO"

    def __init__(self, node: Expression):
        self.node = node
        super().__init__(f"Division by zero in {node!r}")


class EvalDomainError(EvalError, DomainError):
    """Raised when a power (or an overflow) has no finite real value."""

    default_code = "EVAL_DOMAIN_ERROR"

    def __init__(self, node: Expression | None, reason: str, code: str | None = None):
        self.node = node
        self.reason = reason
        super().__init__(reason if node is None else f"{reason} in {node!r}", code)


class ValidationError(AljabarError):
    """Raised when input validation fails."""

    default_code = "VALIDATION_ERROR"


class SimplifierDefect(AssertionError):
    """Raised when the simplifier fails to reach a fixpoint within its pass cap.

    This signals a rule cycle, which is a bug in the rule set. It is never
    converted into a result value.
    """

    def __init__(self, expression: Expression, passes: int):
        self.expression = expression
        self.passes = passes
        super().__init__(
            f"Simplifier did not reach a fixpoint after {passes} passes: {expression!r}"
        )


@dataclass(frozen=True)
class PeelStep:
    """One level of isolation: the operation removed and the accumulator it produced."""

    operation: str  # operator symbol, or "neg"
    hot_position: str  # "left", "right" or "inner"
    accumulator: Expression

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "hot_position": self.hot_position,
            "accumulator": self.accumulator.to_dict(),
        }


@dataclass(frozen=True)
class SolveResult:
    """Base for the outcomes of solving an equation for one variable."""

    variable: str

    ok: ClassVar[bool] = False
    result_type: ClassVar[str] = "unknown"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"ok": self.ok, "type": self.result_type, "variable": self.variable}


@dataclass(frozen=True)
class Solved(SolveResult):
    """The variable was isolated; ``value`` is its closed form."""

    value: Expression
    steps: tuple[PeelStep, ...] = ()

    ok: ClassVar[bool] = True
    result_type: ClassVar[str] = "solved"

    def to_dict(self) -> dict[str, Any]:
        result_dict = super().to_dict()
        result_dict["value"] = self.value.to_dict()
        result_dict["steps"] = [step.to_dict() for step in self.steps]
        return result_dict

    def __repr__(self) -> str:
        return f"Solved({self.variable} = {self.value!r})"


@dataclass(frozen=True)
class NoUniqueSolution(SolveResult):
    """The variable occurs zero times or more than once after simplification."""

    occurrences: int

    result_type: ClassVar[str] = "no_unique_solution"

    def to_dict(self) -> dict[str, Any]:
        result_dict = super().to_dict()
        result_dict["occurrences"] = self.occurrences
        return result_dict

    def __repr__(self) -> str:
        return (
            f"NoUniqueSolution(variable={self.variable!r}, "
            f"occurrences={self.occurrences})"
        )


@dataclass(frozen=True)
class DomainViolation(SolveResult):
    """An isolation step would require an undefined operation."""

    reason: str
    code: str = "DOMAIN_VIOLATION"
    node: Expression | None = None

    result_type: ClassVar[str] = "domain_violation"

    def to_dict(self) -> dict[str, Any]:
        result_dict = super().to_dict()
        result_dict["reason"] = self.reason
        result_dict["code"] = self.code
        if self.node is not None:
            result_dict["node"] = self.node.to_dict()
        return result_dict

    def __repr__(self) -> str:
        return (
            f"DomainViolation(variable={self.variable!r}, code={self.code!r}, "
            f"reason={self.reason!r})"
        )


@dataclass
class EvalResult:
    """Result of evaluating an expression through the API."""

    ok: bool
    value: int | Fraction | float | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.value is not None:
            result_dict["value"] = to_json(self.value)
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, error_code={self.error_code!r})"
        return f"EvalResult(ok=True, value={self.value!r})"


@dataclass
class SimplifyResult:
    """Result of simplifying an expression through the API."""

    ok: bool
    expression: Expression | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.expression is not None:
            result_dict["expression"] = self.expression.to_dict()
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict
