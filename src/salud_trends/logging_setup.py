"""Configuración de logging estructurado (structlog sobre logging estándar)."""

from __future__ import annotations

import logging
import sys

import structlog


def _configure_structlog() -> None:
    # Todo pasa por logging estándar: sin setup_logging() sólo se ven WARNING+
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def setup_logging(verbose: bool = False) -> None:
    """Configure console logging for the CLI.

    Args:
        verbose: Log at DEBUG level instead of INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )
    _configure_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a named structured logger."""
    return structlog.get_logger(name)


_configure_structlog()
