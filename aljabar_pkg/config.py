"""Centralized configuration for Aljabar.

This module defines:
- Simplifier safety bounds (fixpoint pass cap, exact exponent limit)
- Input validation limits (tree depth, node count)
- Tolerances used when substituting a solution back into an equation
- The identifier pattern accepted for variable names

Configuration can be overridden via environment variables (prefixed with ALJABAR_).
"""

import os
import re

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("aljabar")
except importlib.metadata.PackageNotFoundError:
    # Fallback if package not installed
    VERSION = "0.1.0"

# Simplifier configuration
SIMPLIFY_MAX_PASSES = int(
    os.getenv("ALJABAR_SIMPLIFY_MAX_PASSES", "64")
)  # fixpoint cap; hitting it is a defect, not a user error
MAX_EXACT_EXPONENT = int(
    os.getenv("ALJABAR_MAX_EXACT_EXPONENT", "4096")
)  # largest |integer exponent| computed with exact arithmetic

# Input validation limits
MAX_EXPRESSION_DEPTH = int(
    os.getenv("ALJABAR_MAX_EXPRESSION_DEPTH", "100")
)  # tree depth
MAX_EXPRESSION_NODES = int(
    os.getenv("ALJABAR_MAX_EXPRESSION_NODES", "5000")
)  # total nodes

# Solution verification tolerances
VERIFY_RELATIVE_TOLERANCE = float(
    os.getenv("ALJABAR_VERIFY_RELATIVE_TOLERANCE", "1e-9")
)
VERIFY_ABSOLUTE_TOLERANCE = float(
    os.getenv("ALJABAR_VERIFY_ABSOLUTE_TOLERANCE", "1e-9")
)
VERIFY_DEFAULT_VALUE = float(
    os.getenv("ALJABAR_VERIFY_DEFAULT_VALUE", "1.5")
)  # value bound to non-target variables during API verification

LOG_LEVEL = os.getenv("ALJABAR_LOG_LEVEL", "WARNING")

VAR_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
