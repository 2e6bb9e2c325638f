"""Tests for logging configuration (cli/log.py)."""

from __future__ import annotations

import logging

import pytest

from opam_cli.cli.log import LOGGER_NAME, configure_logging, level_for
from opam_cli.core.options import Configuration


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logging.getLogger(LOGGER_NAME).handlers.clear()


@pytest.mark.parametrize(
    "flags, level",
    [
        ({}, logging.WARNING),
        ({"verbose": True}, logging.INFO),
        ({"verbose": True, "quiet": True}, logging.WARNING),
        ({"debug": True, "quiet": True}, logging.DEBUG),
    ],
)
def test_level_for(flags: dict[str, bool], level: int) -> None:
    assert level_for(Configuration(root_dir="/r", **flags)) == level


def test_configure_is_idempotent() -> None:
    config = Configuration(root_dir="/r", debug=True)
    configure_logging(config)
    logger = configure_logging(config)
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_uses_rich_handler() -> None:
    from rich.logging import RichHandler

    logger = configure_logging(Configuration(root_dir="/r"))
    assert isinstance(logger.handlers[0], RichHandler)
