"""Help topic resolution for ``opam help [TOPIC]``.

A tiny lookup, not a parser:

* no topic            -> the program help;
* ``topics``          -> the list of command names;
* a command name      -> that command's help;
* anything else       -> :class:`~opam_cli.exceptions.UsageError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from opam_cli.exceptions import UsageError

TOPICS = "topics"


@dataclass(frozen=True, slots=True)
class ProgramHelp:
    pass


@dataclass(frozen=True, slots=True)
class TopicList:
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CommandHelp:
    name: str


HelpRequest = ProgramHelp | TopicList | CommandHelp


def resolve_topic(topic: str | None, command_names: Sequence[str]) -> HelpRequest:
    if topic is None:
        return ProgramHelp()
    if topic == TOPICS:
        return TopicList(tuple(command_names))
    if topic in command_names:
        return CommandHelp(topic)
    accepted = ", ".join((TOPICS, *command_names))
    raise UsageError(f"unknown help topic {topic!r}", hint=f"Must be one of: {accepted}.")
