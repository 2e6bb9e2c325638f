"""Resolved option groups and the configuration they are applied to.

:class:`GlobalOptions` and :class:`BuildOptions` are built once per
invocation from parsed flags.  :class:`Configuration` replaces the
process-wide mutable state of a classic CLI: it is loaded once, each
option group is applied to it exactly once, and every application
returns a new value.

Boolean toggles are OR-combined with the value already present so that
a setting coming from the environment is never cleared by a command
that simply does not mention it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from opam_cli.core.models import (
    Address,
    CompilerVersion,
    RepositoryKind,
    RepositoryName,
)

DEFAULT_REPOSITORY_NAME = RepositoryName("default")
DEFAULT_REPOSITORY_ADDRESS = Address("http://opam.ocamlpro.com")
DEFAULT_COMPILER = CompilerVersion("system")


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options shared by every command."""

    debug: bool
    verbose: bool
    quiet: bool
    switch: str | None
    assume_yes: bool
    root: str


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Options shared by the commands that build packages."""

    keep_build_dir: bool
    make_command: str | None
    skip_checksums: bool


@dataclass(frozen=True, slots=True)
class Configuration:
    """Explicit configuration threaded through handlers and the engine."""

    root_dir: str
    debug: bool = False
    verbose: bool = False
    quiet: bool = False
    switch: str | None = None
    assume_yes: bool = False
    keep_build_dir: bool = False
    verify_checksums: bool = True
    make_command: str = "make"
    default_repository_kind: RepositoryKind = RepositoryKind.HTTP
    default_repository_name: RepositoryName = DEFAULT_REPOSITORY_NAME
    default_repository_address: Address = DEFAULT_REPOSITORY_ADDRESS
    default_compiler: CompilerVersion = DEFAULT_COMPILER

    def with_global_options(
        self,
        options: GlobalOptions,
        *,
        resolve_path: Callable[[str], str],
    ) -> Configuration:
        """Return a copy with *options* applied.

        *resolve_path* turns the requested root into a real path; it is
        injected so that this layer stays free of filesystem access.
        """
        quiet = self.quiet or options.quiet
        return replace(
            self,
            debug=self.debug or options.debug,
            verbose=(not quiet) and (self.verbose or options.verbose),
            quiet=quiet,
            switch=options.switch,
            assume_yes=self.assume_yes or options.assume_yes,
            root_dir=resolve_path(options.root),
        )

    def with_build_options(self, options: BuildOptions) -> Configuration:
        """Return a copy with *options* applied."""
        return replace(
            self,
            keep_build_dir=self.keep_build_dir or options.keep_build_dir,
            verify_checksums=self.verify_checksums and not options.skip_checksums,
            make_command=options.make_command or self.make_command,
        )
