"""Sub-verb routing for commands that are themselves dispatchers.

``config``, ``repository``, ``switch`` and ``pin``-style commands take a
sub-verb as their first positional token, followed by a list of raw
parameters whose expected shape depends on the sub-verb.

A :class:`SubcommandRouter` is built from a table of :class:`SubVerb`
declarations that must cover every member of the command's tag enum.
Routing is two steps:

1. match the first token, case-sensitively, against the declared names
   (aliases such as ``rm``/``remove`` resolve to the same sub-verb);
2. check the number of remaining tokens against the sub-verb's
   :class:`Arity`.

Converting the parameters into typed values is left to the caller, who
knows which converter applies at which position.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, NoReturn, TypeVar

from opam_cli.exceptions import UsageError

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=Enum)


@dataclass(frozen=True, slots=True)
class Arity:
    """Accepted parameter count: ``minimum`` up to ``maximum`` (``None`` = unbounded)."""

    minimum: int = 0
    maximum: int | None = None

    @classmethod
    def exactly(cls, count: int) -> Arity:
        return cls(count, count)

    def accepts(self, count: int) -> bool:
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum


@dataclass(frozen=True, slots=True)
class SubVerb(Generic[V]):
    tag: V
    names: tuple[str, ...]
    arity: Arity
    shape: str
    """Parameter shape shown in messages, e.g. ``"NAME ADDRESS"``."""

    doc: str

    @property
    def name(self) -> str:
        return self.names[0] if self.names else self.tag.value


@dataclass(frozen=True, slots=True)
class Route(Generic[V]):
    """A matched sub-verb and its still-raw parameters."""

    verb: SubVerb[V]
    params: tuple[str, ...]

    @property
    def tag(self) -> V:
        return self.verb.tag


class SubcommandRouter(Generic[V]):
    """Match a sub-verb token and validate the parameter count.

    Parameters
    ----------
    command:
        Name of the owning command, used in messages.
    verbs:
        The sub-verb table.  Names must be unique.
    fallback:
        Optional sub-verb used when the first token matches no name; the
        token then becomes the first parameter.  ``switch 4.01.0`` works
        this way.
    """

    def __init__(
        self,
        command: str,
        verbs: Sequence[SubVerb[V]],
        *,
        fallback: SubVerb[V] | None = None,
    ) -> None:
        self.command = command
        self.verbs: tuple[SubVerb[V], ...] = tuple(verbs)
        self.fallback = fallback
        self._by_name: dict[str, SubVerb[V]] = {}
        for verb in self.verbs:
            for name in verb.names:
                if name in self._by_name:
                    raise ValueError(f"{command}: sub-verb name {name!r} declared twice")
                self._by_name[name] = verb

        declared = {verb.tag for verb in self.verbs}
        if fallback is not None:
            declared.add(fallback.tag)
        tag_type = type(next(iter(declared))) if declared else None
        if tag_type is not None:
            missing = [tag for tag in tag_type if tag not in declared]
            if missing:
                raise ValueError(f"{command}: no sub-verb declared for {missing}")

    @property
    def names(self) -> tuple[str, ...]:
        """Every accepted sub-verb name, in declaration order."""
        return tuple(self._by_name)

    def _accepted(self) -> str:
        return ", ".join(self.names)

    def resolve(self, token: str) -> SubVerb[V]:
        try:
            return self._by_name[token]
        except KeyError:
            raise UsageError(
                f"invalid sub-command {token!r} for `{self.command}'",
                hint=f"Must be one of: {self._accepted()}.",
            ) from None

    def route(self, token: str | None, params: Sequence[str]) -> Route[V]:
        """Resolve *token* and validate *params* against its arity."""
        if token is None:
            raise UsageError(
                f"`{self.command}' requires a sub-command",
                hint=f"Must be one of: {self._accepted()}.",
            )
        raw = tuple(params)
        if token in self._by_name or self.fallback is None:
            verb = self.resolve(token)
        else:
            verb = self.fallback
            raw = (token, *raw)

        if not verb.arity.accepts(len(raw)):
            self._arity_error(verb, len(raw))

        logger.debug("%s: routed to %s with %r", self.command, verb.name, raw)
        return Route(verb, raw)

    def _arity_error(self, verb: SubVerb[V], count: int) -> NoReturn:
        label = f"{self.command} {verb.name}".strip() if verb.names else self.command
        expected = f"{label} {verb.shape}".strip()
        if count < verb.arity.minimum:
            message = f"too few parameters for `{label}'"
        else:
            message = f"too many parameters for `{label}'"
        raise UsageError(message, hint=f"Expected: {expected}")

    def describe(self) -> str:
        """Plain-text COMMANDS section for help output."""
        lines = ["COMMANDS:"]
        for verb in self.verbs:
            lines.append(f"  {', '.join(verb.names)}")
            lines.append(f"      {verb.doc}")
        if self.fallback is not None:
            lines.append(f"  {self.fallback.shape}")
            lines.append(f"      {self.fallback.doc}")
        return "\n".join(lines)
