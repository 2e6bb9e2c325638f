"""Logging configuration for the CLI process.

Every module logs through ``logging.getLogger(__name__)``; this module
attaches a single handler to the ``opam_cli`` logger once the final
:class:`~opam_cli.core.options.Configuration` is known.  Rich renders the
records when installed, a plain stderr handler is used otherwise.
"""

from __future__ import annotations

import logging

from opam_cli.core.options import Configuration

LOGGER_NAME = "opam_cli"


def level_for(config: Configuration) -> int:
    """DEBUG when debugging, INFO when verbose, WARNING otherwise."""
    if config.debug:
        return logging.DEBUG
    if config.verbose and not config.quiet:
        return logging.INFO
    return logging.WARNING


def _make_handler() -> logging.Handler:
    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        return handler
    return RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
        rich_tracebacks=True,
    )


def configure_logging(config: Configuration) -> logging.Logger:
    """(Re)configure the package logger for *config* and return it."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(_make_handler())
    logger.setLevel(level_for(config))
    logger.propagate = False
    return logger
