"""Interactive yes/no confirmation offered to the engine.

The engine receives :func:`make_confirm`'s result through the
:class:`~opam_cli.core.protocols.Session`; with ``--yes`` (or
``OPAMYES``) every question is answered yes without prompting.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from opam_cli.core.options import Configuration
from opam_cli.exceptions import EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive confirmation."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def ask(question: str) -> bool:
    """Prompt on the terminal; defaults to yes.

    Ctrl+C during the prompt propagates as ``KeyboardInterrupt``.
    """
    questionary = _import_questionary()
    answer = questionary.confirm(question, default=True).unsafe_ask()
    return bool(answer)


def make_confirm(config: Configuration) -> Callable[[str], bool]:
    """Return the confirmation callback matching *config*."""
    if config.assume_yes:
        return lambda _question: True
    return ask
