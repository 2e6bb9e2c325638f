"""Protocols (interfaces) between the command line and the engine.

The engine (dependency resolution, repository synchronisation, builds,
switch management) lives outside this package.  The CLI depends ONLY
on :class:`Client`; any object with a matching :meth:`Client.run`
satisfies it structurally.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from opam_cli.core.actions import Action
from opam_cli.core.options import Configuration


@dataclass(frozen=True, slots=True)
class Session:
    """Everything an engine may consult while running one action."""

    config: Configuration
    """Configuration with every option group already applied."""

    confirm: Callable[[str], bool]
    """Ask the user a yes/no question; honours ``--yes``."""


class Client(Protocol):
    """Contract for package-management engines."""

    def run(self, action: Action, session: Session) -> int | None:
        """Perform *action*.

        Returns ``None`` on success, or an explicit exit code when the
        engine decides to stop early (``0`` is a clean early stop).
        Engines report named failures by raising
        :class:`~opam_cli.exceptions.DomainFailure`.
        """
        ...  # pragma: no cover
