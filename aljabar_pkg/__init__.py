"""Aljabar package: expression trees, simplifier, evaluator and single-variable solver."""

__all__ = [
    "api",
    "arithmetic",
    "config",
    "equation",
    "evaluator",
    "expression",
    "interop",
    "logging_config",
    "simplifier",
    "solver",
    "types",
]

# Public API exports

__api_exports__ = [
    "evaluate_expression",
    "simplify_expression",
    "solve_equation",
    "validate_expression",
]
