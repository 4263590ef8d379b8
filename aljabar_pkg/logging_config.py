"""Logging for the algebra engine.

Every engine module logs under the ``aljabar`` namespace:

- ``aljabar.simplifier``: DEBUG for the pass count at each fixpoint and for
  folds left undone (``1/0``, ``0^0``). ERROR when the pass cap is hit, just
  before SimplifierDefect is raised.
- ``aljabar.solver``: DEBUG trace of each state change and each peel step,
  tagged ``[normalizing]``, ``[scanning]``, ``[isolating]`` or ``[done]``.
- ``aljabar.evaluator``: DEBUG when a division by zero is hit.
- ``aljabar.api``: INFO when solve_equation() ends without a solution, and
  WARNING when it rejects its input or a solution fails substitution.

Nothing is emitted until an application attaches handlers, either its own or
the ones installed by setup_logging().
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from .config import LOG_LEVEL

ENGINE_LOGGER = "aljabar"


class StructuredFormatter(logging.Formatter):
    """One line per record: ``<iso time> [<LEVEL>] aljabar.<module>: <message>``.

    A traceback, when present, follows on the next lines.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        message = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def _attach(logger: logging.Logger, handler: logging.Handler) -> None:
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)


def setup_logging(
    level: str = LOG_LEVEL, log_file: Optional[str] = None
) -> logging.Logger:
    """Route the engine's records to stderr and, optionally, a file.

    Calling it again replaces the handlers from the previous call. Pass
    ``"DEBUG"`` to see the solver's peel trace and the simplifier's pass
    counts; the default ``ALJABAR_LOG_LEVEL`` (WARNING) leaves only rejected
    API calls and simplifier defects.

    Args:
        level: Level name for the ``aljabar`` logger. Unknown names mean WARNING.
        log_file: Path of a file that also receives every record

    Returns:
        The ``aljabar`` logger
    """
    logger = logging.getLogger(ENGINE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(sys.stderr))
    if log_file:
        _attach(logger, logging.FileHandler(log_file))
    return logger


def get_logger(name: str) -> logging.Logger:
    """The logger for one engine module, e.g. ``get_logger("solver")``."""
    return logging.getLogger(f"{ENGINE_LOGGER}.{name}")
