"""Default engine: report the requested action instead of performing it.

When no package-management engine is plugged in, the command line still
parses, validates and dispatches; :class:`DryRunClient` then renders the
fully typed action as a table on stdout so the result of parsing can be
inspected.
"""

from __future__ import annotations

import dataclasses
import re
import sys
from enum import Enum
from typing import Any

from opam_cli.core.actions import Action
from opam_cli.core.protocols import Session

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def action_label(action: Action) -> str:
    """``RepositoryAdd`` -> ``repository add``."""
    return _CAMEL_RE.sub(" ", type(action).__name__).lower()


def render_value(value: Any) -> str:
    """Human-readable rendering of an action field."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, frozenset):
        return " ".join(sorted(str(item) for item in value)) or "-"
    if isinstance(value, tuple):
        return " ".join(str(item) for item in value) or "-"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        inner = ", ".join(
            f"{f.name}={render_value(getattr(value, f.name))}" for f in dataclasses.fields(value)
        )
        return f"{action_label(value)}({inner})" if inner else action_label(value)
    return str(value)


def action_rows(action: Action) -> list[tuple[str, str]]:
    return [(f.name, render_value(getattr(action, f.name))) for f in dataclasses.fields(action)]


class DryRunClient:
    """Engine stand-in that prints each action and reports success."""

    def run(self, action: Action, session: Session) -> int | None:
        rows = action_rows(action)
        title = f"{action_label(action)} (switch: {session.config.switch or 'default'})"
        try:
            from rich.console import Console
            from rich.markup import escape
            from rich.table import Table
        except ModuleNotFoundError:
            print(title, file=sys.stdout)
            for name, value in rows:
                print(f"  {name:<16} {value}", file=sys.stdout)
            return None

        console = Console(highlight=False)
        console.print(f"[bold]{escape(title)}[/bold]")
        if not rows:
            return None
        table = Table(show_header=True, header_style="bold cyan", border_style="dim")
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for name, value in rows:
            table.add_row(name, escape(value))
        console.print(table)
        return None
