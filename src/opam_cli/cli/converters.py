"""Value converters: parse/print pairs for every argument type.

A :class:`Converter` turns raw command-line text into a domain value
and renders the value back.  For every canonically-formed input ``s``
``conv.print(conv.parse(s)) == s``.

Converters are also argparse ``type=`` callables: when used that way a
parse failure surfaces as :class:`argparse.ArgumentTypeError`, which the
command parser turns into a :class:`~opam_cli.exceptions.UsageError`.
"""

from __future__ import annotations

import argparse
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import partial
from typing import Generic, TypeVar

from opam_cli.core.actions import PinTarget, PinVersion, Unpin
from opam_cli.core.inference import UNPIN_TOKEN, Probe, pin_target
from opam_cli.core.models import (
    Address,
    Basename,
    CompilerVersion,
    Filename,
    PackageName,
    RepositoryKind,
    RepositoryName,
    Section,
    SwitchName,
    Variable,
)
from opam_cli.exceptions import UsageError
from opam_cli.infra.filesystem import path_exists

T = TypeVar("T")

_INT_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True, slots=True)
class Converter(Generic[T]):
    """Bidirectional mapping between raw text and a domain value."""

    metavar: str
    parser: Callable[[str], T]
    """Raises :class:`ValueError` on malformed input."""

    printer: Callable[[T], str] = str

    def parse(self, raw: str) -> T:
        try:
            return self.parser(raw)
        except ValueError as exc:
            raise UsageError(f"invalid {self.metavar} {raw!r}: {exc}") from exc

    def print(self, value: T) -> str:
        return self.printer(value)

    def parse_all(self, raws: Iterable[str]) -> tuple[T, ...]:
        return tuple(self.parse(raw) for raw in raws)

    def __call__(self, raw: str) -> T:
        """argparse ``type=`` hook."""
        try:
            return self.parser(raw)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def _parse_int(raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise ValueError(f"{raw!r} is not an integer")
    return int(raw)


def _parse_positive_int(raw: str) -> int:
    value = _parse_int(raw)
    if value < 1:
        raise ValueError(f"{value} is not a positive integer")
    return value


def _parse_string(raw: str) -> str:
    return raw


STRING: Converter[str] = Converter("STRING", _parse_string)
INT: Converter[int] = Converter("INT", _parse_int)
POSITIVE_INT: Converter[int] = Converter("INT", _parse_positive_int)


# ---------------------------------------------------------------------------
# Domain identifiers
# ---------------------------------------------------------------------------

PACKAGE_NAME: Converter[PackageName] = Converter("PACKAGE", PackageName.of_string)
REPOSITORY_NAME: Converter[RepositoryName] = Converter("REPOSITORY", RepositoryName.of_string)
ADDRESS: Converter[Address] = Converter("ADDRESS", Address.of_string)
COMPILER: Converter[CompilerVersion] = Converter("COMPILER", CompilerVersion.of_string)
SWITCH: Converter[SwitchName] = Converter("SWITCH", SwitchName.of_string)
FILENAME: Converter[Filename] = Converter("FILE", Filename.of_string)
BASENAME: Converter[Basename] = Converter("FILE", Basename.of_string)
VARIABLE: Converter[Variable] = Converter("VARIABLE", Variable.of_string)
SECTION: Converter[Section] = Converter("SECTION", Section.of_string)
REPOSITORY_KIND: Converter[RepositoryKind] = Converter("KIND", RepositoryKind.of_string)


# ---------------------------------------------------------------------------
# Pin targets
# ---------------------------------------------------------------------------

def _print_pin(target: PinTarget) -> str:
    if isinstance(target, Unpin):
        return UNPIN_TOKEN
    if isinstance(target, PinVersion):
        return target.version
    return str(target.address)


def pin_converter(
    kind: RepositoryKind | None,
    *,
    exists: Probe = path_exists,
) -> Converter[PinTarget]:
    """Converter for the ``pin`` target; how it is read depends on ``--kind``."""
    return Converter("PIN", partial(pin_target, kind=kind, exists=exists), _print_pin)
