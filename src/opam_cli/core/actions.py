"""Action descriptors handed to the package-management engine.

Each class is one concrete operation.  Together they form the closed
:data:`Action` union: every field is typed, the only free text left is
what the domain models as free text (search patterns, version strings).
"""

from __future__ import annotations

from dataclasses import dataclass

from opam_cli.core.models import (
    Address,
    Basename,
    CompilerVersion,
    Filename,
    PackageName,
    Repository,
    RepositoryKind,
    RepositoryName,
    Section,
    SwitchName,
    Variable,
)


# ---------------------------------------------------------------------------
# Client state and queries
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Init:
    repository: Repository
    compiler: CompilerVersion
    cores: int


@dataclass(frozen=True, slots=True)
class ListPackages:
    """List or search packages; ``name_only=False`` also matches descriptions."""

    patterns: tuple[str, ...]
    print_short: bool = False
    installed_only: bool = False
    name_only: bool = True
    case_sensitive: bool = False


@dataclass(frozen=True, slots=True)
class Info:
    patterns: tuple[str, ...]


# ---------------------------------------------------------------------------
# Configuration queries
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConfigEnv:
    csh: bool = False


@dataclass(frozen=True, slots=True)
class ConfigList:
    packages: tuple[PackageName, ...] = ()


@dataclass(frozen=True, slots=True)
class ConfigVariable:
    variable: Variable


@dataclass(frozen=True, slots=True)
class ConfigSubst:
    files: tuple[Basename, ...]


@dataclass(frozen=True, slots=True)
class ConfigIncludes:
    recursive: bool
    packages: tuple[PackageName, ...]


@dataclass(frozen=True, slots=True)
class ConfigCompile:
    """Compiler or linker flags for a set of sections."""

    recursive: bool
    is_link: bool
    is_byte: bool
    sections: tuple[Section, ...]


# ---------------------------------------------------------------------------
# Package operations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Install:
    packages: frozenset[PackageName]


@dataclass(frozen=True, slots=True)
class Remove:
    packages: frozenset[PackageName]


@dataclass(frozen=True, slots=True)
class Reinstall:
    packages: frozenset[PackageName]


@dataclass(frozen=True, slots=True)
class Update:
    repositories: tuple[RepositoryName, ...]


@dataclass(frozen=True, slots=True)
class Upgrade:
    packages: frozenset[PackageName]


@dataclass(frozen=True, slots=True)
class Upload:
    opam: Filename
    descr: Filename
    archive: Filename
    repository: RepositoryName | None = None


# ---------------------------------------------------------------------------
# Repository management
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RepositoryAdd:
    """Register a repository; ``priority=None`` lets the engine rank it first."""

    name: RepositoryName
    kind: RepositoryKind
    address: Address
    priority: int | None = None


@dataclass(frozen=True, slots=True)
class RepositoryRemove:
    name: RepositoryName


@dataclass(frozen=True, slots=True)
class RepositoryList:
    pass


@dataclass(frozen=True, slots=True)
class RepositoryPriority:
    name: RepositoryName
    priority: int


# ---------------------------------------------------------------------------
# Compiler switches
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SwitchInstall:
    """Install *switch* built from the *compiler* description."""

    quiet: bool
    switch: SwitchName
    compiler: CompilerVersion
    no_base_packages: bool = False


@dataclass(frozen=True, slots=True)
class SwitchTo:
    quiet: bool
    switch: SwitchName


@dataclass(frozen=True, slots=True)
class SwitchRemove:
    switches: tuple[SwitchName, ...]


@dataclass(frozen=True, slots=True)
class SwitchExport:
    filename: Filename


@dataclass(frozen=True, slots=True)
class SwitchImport:
    filename: Filename


@dataclass(frozen=True, slots=True)
class SwitchReinstall:
    switch: SwitchName


@dataclass(frozen=True, slots=True)
class SwitchList:
    pass


@dataclass(frozen=True, slots=True)
class SwitchCurrent:
    pass


# ---------------------------------------------------------------------------
# Pinning
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PinVersion:
    version: str


@dataclass(frozen=True, slots=True)
class PinPath:
    address: Address


@dataclass(frozen=True, slots=True)
class PinGit:
    address: Address


@dataclass(frozen=True, slots=True)
class Unpin:
    pass


PinTarget = PinVersion | PinPath | PinGit | Unpin


@dataclass(frozen=True, slots=True)
class Pin:
    package: PackageName
    target: PinTarget


@dataclass(frozen=True, slots=True)
class PinList:
    pass


Action = (
    Init
    | ListPackages
    | Info
    | ConfigEnv
    | ConfigList
    | ConfigVariable
    | ConfigSubst
    | ConfigIncludes
    | ConfigCompile
    | Install
    | Remove
    | Reinstall
    | Update
    | Upgrade
    | Upload
    | RepositoryAdd
    | RepositoryRemove
    | RepositoryList
    | RepositoryPriority
    | SwitchInstall
    | SwitchTo
    | SwitchRemove
    | SwitchExport
    | SwitchImport
    | SwitchReinstall
    | SwitchList
    | SwitchCurrent
    | Pin
    | PinList
)
"""Every operation the command line can request from the engine."""
