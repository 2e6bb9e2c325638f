"""Command descriptors, the command registry and per-command parsing.

A :class:`CommandDescriptor` is pure data: documentation, the option
groups it includes, its own option and positional declarations, an
optional sub-verb router and a handler.  The same declarations drive
both argument parsing and ``--help`` output.

:class:`CommandRegistry` selects a descriptor from the first token of
the argument vector.  Exact names and aliases win; otherwise an
unambiguous prefix of a command name is accepted.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, NoReturn

from opam_cli.cli.options import (
    GLOBAL_OPTIONS,
    Declaration,
    OptionGroup,
    Positional,
    install,
    install_positionals,
)
from opam_cli.cli.subcommands import Route, SubcommandRouter
from opam_cli.core.actions import Action
from opam_cli.core.options import Configuration
from opam_cli.core.protocols import Client, Session
from opam_cli.exceptions import UsageError
from opam_cli.version import __version__

logger = logging.getLogger(__name__)

PROGRAM = "opam"

MORE_HELP = (
    f"Use `{PROGRAM} COMMAND --help' for help on a single command.\n"
    f"Use `{PROGRAM} help topics' for the list of help topics."
)


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors as :class:`UsageError`.

    argparse would print and exit with status 2; usage errors must be
    reported by the error boundary with status 1 instead.
    """

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, usage=self.format_usage().strip())


Handler = Callable[["Invocation"], int]


@dataclass(frozen=True, slots=True)
class CommandDescriptor:
    """Declaration of one top-level verb."""

    name: str
    doc: str
    description: tuple[str, ...]
    handler: Handler
    options: tuple[Declaration, ...] = ()
    positionals: tuple[Positional, ...] = ()
    groups: tuple[OptionGroup[Any], ...] = (GLOBAL_OPTIONS,)
    router: SubcommandRouter[Any] | None = None
    aliases: tuple[str, ...] = ()

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    def build_parser(self, config: Configuration, *, invoked_as: str | None = None) -> CommandParser:
        """Build the argparse parser for this command.

        Command-local declarations are installed after the option
        groups; when a short flag collides, the command keeps it and the
        group option stays reachable through its long name.
        """
        epilog = [MORE_HELP]
        if self.router is not None:
            epilog.insert(0, self.router.describe())
        parser = CommandParser(
            prog=f"{PROGRAM} {invoked_as or self.name}",
            description="\n\n".join((self.doc, *self.description)),
            epilog="\n\n".join(epilog),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            conflict_handler="resolve",
        )
        for group in self.groups:
            section = parser.add_argument_group(group.title, group.description)
            install(section, group.declarations, config)
        install(parser, self.options, config)
        install_positionals(parser, self.positionals)
        return parser


@dataclass(frozen=True, slots=True)
class Invocation:
    """A parsed command line, ready for its handler."""

    command: CommandDescriptor
    invoked_as: str
    args: argparse.Namespace
    config: Configuration
    client: Client
    registry: CommandRegistry
    confirm: Callable[[str], bool] = field(default=lambda _question: True)

    def route(self) -> Route[Any]:
        """Route the ``COMMAND PARAMS...`` positionals through the command's router."""
        if self.command.router is None:
            raise TypeError(f"{self.command.name} has no sub-commands")
        return self.command.router.route(self.args.subcommand, self.args.params)

    def execute(self, action: Action) -> int:
        """Hand *action* to the engine and turn its result into an exit code."""
        logger.debug("%s: running %r", self.invoked_as, action)
        outcome = self.client.run(action, Session(config=self.config, confirm=self.confirm))
        return 0 if outcome is None else outcome


class CommandRegistry:
    """All top-level commands, addressable by name, alias or unique prefix."""

    def __init__(self, descriptors: Iterable[CommandDescriptor]) -> None:
        self.descriptors: tuple[CommandDescriptor, ...] = tuple(descriptors)
        self._by_name: dict[str, CommandDescriptor] = {}
        for descriptor in self.descriptors:
            for name in descriptor.names:
                if name in self._by_name:
                    raise ValueError(f"command name {name!r} declared twice")
                self._by_name[name] = descriptor

    @property
    def names(self) -> tuple[str, ...]:
        """Every command name and alias, in declaration order."""
        return tuple(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def lookup(self, token: str) -> CommandDescriptor:
        """Select the command named (or uniquely prefixed) by *token*."""
        if token in self._by_name:
            return self._by_name[token]

        candidates = [name for name in self._by_name if name.startswith(token)]
        distinct = {id(self._by_name[name]) for name in candidates}
        if len(distinct) == 1:
            return self._by_name[candidates[0]]
        if candidates:
            raise UsageError(
                f"command {token!r} is ambiguous",
                hint=f"It could be: {', '.join(candidates)}.",
            )
        raise UsageError(
            f"unknown command {token!r}",
            hint=f"Must be one of: {', '.join(self.names)}.",
        )

    def build_program_parser(self, config: Configuration) -> CommandParser:
        """Top-level parser: ``--help``, ``--version``, the common options and the command list.

        Without a command the common options are accepted and ignored;
        the program help is shown either way.
        """
        width = max(len(name) for name in self.names)
        listing = "\n".join(
            f"  {name:<{width}}  {self._by_name[name].doc}" for name in self.names
        )
        parser = CommandParser(
            prog=PROGRAM,
            usage=f"{PROGRAM} [--version] [--help] [OPTIONS] COMMAND [ARGS]...",
            description="a Package Manager for OCaml",
            epilog=f"COMMANDS:\n{listing}\n\n{MORE_HELP}",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}",
        )
        section = parser.add_argument_group(GLOBAL_OPTIONS.title, GLOBAL_OPTIONS.description)
        install(section, GLOBAL_OPTIONS.declarations, config)
        return parser


def parse_command(
    descriptor: CommandDescriptor,
    tokens: Sequence[str],
    config: Configuration,
    *,
    invoked_as: str | None = None,
) -> tuple[CommandParser, argparse.Namespace]:
    """Parse *tokens* (everything after the command name) for *descriptor*.

    Options and positionals may be interleaved freely.
    """
    parser = descriptor.build_parser(config, invoked_as=invoked_as)
    return parser, parser.parse_intermixed_args(list(tokens))
