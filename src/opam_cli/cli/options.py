"""Declarative option and positional declarations.

Options are plain data: a command descriptor lists the declarations it
accepts and :func:`install` turns them into argparse arguments.  Names
follow the short/long convention: one-letter names become ``-x``,
longer names become ``--name``.

Two reusable :class:`OptionGroup` bundles are defined here:
:data:`GLOBAL_OPTIONS`, included by every command, and
:data:`BUILD_OPTIONS`, included by the commands that build packages.
A group is included verbatim; commands never rename its members.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from opam_cli.cli.converters import (
    REPOSITORY_KIND,
    STRING,
    Converter,
)
from opam_cli.core.models import KIND_TOKENS
from opam_cli.core.options import BuildOptions, Configuration, GlobalOptions
from opam_cli.infra.filesystem import real_path

G = TypeVar("G")

GLOBAL_SECTION = "COMMON OPTIONS"
BUILD_SECTION = "BUILD OPTIONS"


def _no_default(_config: Configuration) -> Any:
    return None


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Flag:
    """A boolean switch, ``False`` unless given."""

    names: tuple[str, ...]
    dest: str
    doc: str


@dataclass(frozen=True, slots=True)
class Opt:
    """An option taking one value.

    ``default`` receives the configuration loaded at startup; this is
    the only place where a default may depend on process state.
    """

    names: tuple[str, ...]
    dest: str
    doc: str
    converter: Converter[Any] = STRING
    default: Callable[[Configuration], Any] = _no_default
    metavar: str | None = None


@dataclass(frozen=True, slots=True)
class Positional:
    """A positional argument; ``nargs`` follows argparse (``None``, ``"?"``, ``"*"``)."""

    dest: str
    metavar: str
    doc: str
    converter: Converter[Any] = STRING
    nargs: str | None = None
    default: Any = None


Declaration = Flag | Opt


@dataclass(frozen=True, slots=True)
class OptionGroup(Generic[G]):
    """A named, reusable bundle of declarations resolved into one value."""

    title: str
    description: str
    declarations: tuple[Declaration, ...]
    build: Callable[..., G]
    apply: Callable[[Configuration, G], Configuration]

    def resolve(self, namespace: argparse.Namespace) -> G:
        """Assemble the group value from parsed arguments."""
        return self.build(**{d.dest: getattr(namespace, d.dest) for d in self.declarations})


# ---------------------------------------------------------------------------
# argparse wiring
# ---------------------------------------------------------------------------

def option_strings(names: Iterable[str]) -> list[str]:
    """``("v", "verbose")`` -> ``["-v", "--verbose"]``."""
    return [f"-{name}" if len(name) == 1 else f"--{name}" for name in names]


def install(
    target: argparse.ArgumentParser | argparse._ArgumentGroup,
    declarations: Sequence[Declaration],
    config: Configuration,
) -> None:
    """Add *declarations* to *target*, resolving dynamic defaults against *config*."""
    for decl in declarations:
        flags = option_strings(decl.names)
        if isinstance(decl, Flag):
            target.add_argument(*flags, dest=decl.dest, action="store_true", help=decl.doc)
            continue
        target.add_argument(
            *flags,
            dest=decl.dest,
            type=decl.converter,
            default=decl.default(config),
            metavar=decl.metavar or decl.converter.metavar,
            help=decl.doc,
        )


def install_positionals(
    parser: argparse.ArgumentParser,
    positionals: Sequence[Positional],
) -> None:
    for pos in positionals:
        kwargs: dict[str, Any] = {"type": pos.converter, "metavar": pos.metavar, "help": pos.doc}
        if pos.nargs is not None:
            kwargs["nargs"] = pos.nargs
            kwargs["default"] = [] if pos.nargs == "*" else pos.default
        parser.add_argument(pos.dest, **kwargs)


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------

def _apply_global(config: Configuration, options: GlobalOptions) -> Configuration:
    return config.with_global_options(options, resolve_path=real_path)


def _apply_build(config: Configuration, options: BuildOptions) -> Configuration:
    return config.with_build_options(options)


GLOBAL_OPTIONS: OptionGroup[GlobalOptions] = OptionGroup(
    title=GLOBAL_SECTION,
    description="These options are common to all commands.",
    declarations=(
        Flag(("debug",), "debug", "Print debug message on stdout."),
        Flag(("v", "verbose"), "verbose", "Be more verbose."),
        Flag(("q", "quiet"), "quiet", "Be quiet."),
        Opt(
            ("s", "switch"),
            "switch",
            "Use SWITCH as the current compiler switch.",
            default=lambda config: config.switch,
            metavar="SWITCH",
        ),
        Flag(
            ("y", "yes"),
            "assume_yes",
            "Disable interactive mode and answer yes to all questions that "
            "would otherwise be asked to the user.",
        ),
        Opt(
            ("r", "root"),
            "root",
            "Use ROOT as the current root path.",
            default=lambda config: config.root_dir,
            metavar="ROOT",
        ),
    ),
    build=GlobalOptions,
    apply=_apply_global,
)


BUILD_OPTIONS: OptionGroup[BuildOptions] = OptionGroup(
    title=BUILD_SECTION,
    description="These options are common to the commands that build packages.",
    declarations=(
        Flag(("k", "keep-build-dir"), "keep_build_dir", "Keep the build directory."),
        Opt(
            ("m", "makecmd", "make"),
            "make_command",
            "Use MAKE as the default 'make' command.",
            metavar="MAKE",
        ),
        Flag(
            ("n", "no-checksums"),
            "skip_checksums",
            "Do not verify the checksum of downloaded archives.",
        ),
    ),
    build=BuildOptions,
    apply=_apply_build,
)


# ---------------------------------------------------------------------------
# Flags shared by several commands
# ---------------------------------------------------------------------------

PRINT_SHORT = Flag(
    ("s", "short"),
    "print_short",
    "Output the names of packages separated by one whitespace instead of "
    "using the usual formatting.",
)

INSTALLED_ONLY = Flag(("i", "installed"), "installed_only", "List installed packages only.")

REPOSITORY_KIND_OPTION = Opt(
    ("kind",),
    "kind",
    "Specify the kind of the repository to be set (one of "
    + ", ".join(KIND_TOKENS)
    + "; the main ones are 'http', 'local' or 'git').",
    converter=REPOSITORY_KIND,
)
