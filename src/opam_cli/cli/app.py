"""CLI application entry point and command dispatch for opam.

This module is the **sole error boundary** for the entire application.
It catches :class:`~opam_cli.exceptions.OpamCliError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-facing messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here: every action is delegated to the
  engine through :class:`~opam_cli.core.protocols.Client`.
* Configuration is loaded once, option groups are applied once, before
  the handler runs; nothing mutates it afterwards.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import logging
import os
import shlex
import sys
from collections.abc import Sequence

from opam_cli.cli import exit_codes
from opam_cli.cli.commands import REGISTRY
from opam_cli.cli.console import console, escape
from opam_cli.cli.descriptors import CommandRegistry, Invocation, parse_command
from opam_cli.cli.dry_run import DryRunClient
from opam_cli.cli.log import configure_logging
from opam_cli.cli.prompt import make_confirm
from opam_cli.core.options import Configuration
from opam_cli.core.protocols import Client
from opam_cli.exceptions import OpamCliError, UsageError
from opam_cli.infra.environment import load_configuration

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def dispatch(
    tokens: Sequence[str],
    *,
    client: Client,
    config: Configuration,
    registry: CommandRegistry = REGISTRY,
) -> int:
    """Select the command named by ``tokens[0]`` and run it.

    Flow:
    1. Look the command up (exact name, alias or unique prefix).
    2. Parse the remaining tokens against its declarations.
    3. Apply every option group it includes to *config*.
    4. Run the handler, which hands one action to *client*.
    """
    invoked_as, rest = tokens[0], tokens[1:]
    descriptor = registry.lookup(invoked_as)
    parser, args = parse_command(descriptor, rest, config, invoked_as=invoked_as)

    for group in descriptor.groups:
        config = group.apply(config, group.resolve(args))
    configure_logging(config)
    logger.debug("command %s (%s), root %s", descriptor.name, invoked_as, config.root_dir)

    invocation = Invocation(
        command=descriptor,
        invoked_as=invoked_as,
        args=args,
        config=config,
        client=client,
        registry=registry,
        confirm=make_confirm(config),
    )
    try:
        return descriptor.handler(invocation)
    except UsageError as exc:
        if exc.usage is None:
            exc.usage = parser.format_usage().strip()
        raise


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: Sequence[str] | None = None,
    *,
    client: Client | None = None,
    config: Configuration | None = None,
) -> int:
    """Run the opam CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    client:
        Engine receiving the parsed action.  Defaults to
        :class:`~opam_cli.cli.dry_run.DryRunClient`.
    config:
        Initial configuration.  Defaults to the ``OPAM*`` environment.

    Returns
    -------
    int
        OS process exit code.
    """
    tokens = list(sys.argv[1:] if argv is None else argv)
    if config is None:
        config = load_configuration()
    if client is None:
        client = DryRunClient()

    if not tokens or tokens[0].startswith("-"):
        parser = REGISTRY.build_program_parser(config)
        parser.parse_args(tokens)
        parser.print_help()
        return exit_codes.SUCCESS

    return dispatch(tokens, client=client, config=config)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _command_line(argv: Sequence[str] | None) -> str:
    prog = os.path.basename(sys.argv[0]) or "opam"
    args = sys.argv[1:] if argv is None else argv
    return shlex.join([prog, *args])


def describe_failure(exc: BaseException) -> str:
    """One-line description of an unclassified failure."""
    if isinstance(exc, OSError) and exc.strerror:
        prog = os.path.basename(sys.argv[0]) or "opam"
        target = f" {exc.filename!r}" if exc.filename else ""
        return f"{prog}:{target} failed: {exc.strerror}"
    return f"{type(exc).__name__}: {exc}"


def _print_trace(exc: BaseException) -> None:
    try:
        from rich.traceback import Traceback
    except ModuleNotFoundError:
        import traceback

        traceback.print_exception(exc, file=sys.stderr)
        return
    console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))


def cli(
    argv: Sequence[str] | None = None,
    *,
    client: Client | None = None,
) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main(argv, client=client)
        sys.exit(code)
    except UsageError as exc:
        if exc.usage:
            console.print(exc.usage, markup=False)
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except OpamCliError as exc:
        console.print(f"  '{_command_line(argv)}' failed.", markup=False)
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(f"  '{_command_line(argv)}' failed.", markup=False)
        console.print(f"[bold red]Fatal error:[/bold red] {escape(describe_failure(exc))}")
        if logging.getLogger("opam_cli").isEnabledFor(logging.DEBUG):
            _print_trace(exc)
        sys.exit(exit_codes.UNEXPECTED_ERROR)
