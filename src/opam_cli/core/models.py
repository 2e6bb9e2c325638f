"""Domain identifiers for opam-cli.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond construction-time validation and string rendering.
Each identifier exposes ``of_string`` (raising :class:`ValueError` on
malformed input) and renders back to its canonical text via ``str()``.

Validation here is purely lexical: whether a package or repository
actually exists is the engine's business, not ours.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


def _require_token(kind: str, value: str) -> str:
    """Reject empty values and values containing whitespace."""
    if not value:
        raise ValueError(f"empty {kind}")
    if any(ch.isspace() for ch in value):
        raise ValueError(f"{kind} {value!r} must not contain whitespace")
    return value


# ---------------------------------------------------------------------------
# Simple names
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PackageName:
    """Name of an opam package (``ocamlfind``, ``lwt``...)."""

    value: str

    @classmethod
    def of_string(cls, raw: str) -> PackageName:
        _require_token("package name", raw)
        if "/" in raw or ":" in raw:
            raise ValueError(f"invalid package name {raw!r}")
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class RepositoryName:
    """Name under which a repository is registered."""

    value: str

    @classmethod
    def of_string(cls, raw: str) -> RepositoryName:
        _require_token("repository name", raw)
        if "/" in raw:
            raise ValueError(f"invalid repository name {raw!r}")
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class CompilerVersion:
    """Compiler description identifier (``4.01.0``, ``4.01.0+flambda``, ``system``)."""

    value: str

    @classmethod
    def of_string(cls, raw: str) -> CompilerVersion:
        return cls(_require_token("compiler version", raw))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SwitchName:
    """Name of a compiler switch (an installation prefix)."""

    value: str

    @classmethod
    def of_string(cls, raw: str) -> SwitchName:
        _require_token("switch name", raw)
        if "/" in raw:
            raise ValueError(f"invalid switch name {raw!r}")
        return cls(raw)

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Address:
    """A directory address: local path or remote URL, kept verbatim."""

    value: str

    @classmethod
    def of_string(cls, raw: str) -> Address:
        if not raw:
            raise ValueError("empty address")
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Filename:
    """A file path, relative or absolute, kept verbatim."""

    value: str

    @classmethod
    def of_string(cls, raw: str) -> Filename:
        if not raw:
            raise ValueError("empty file name")
        if raw.endswith("/"):
            raise ValueError(f"{raw!r} names a directory, not a file")
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Basename:
    """A bare file name without directory part (``Makefile.config``)."""

    value: str

    @classmethod
    def of_string(cls, raw: str) -> Basename:
        if not raw:
            raise ValueError("empty file name")
        if "/" in raw:
            raise ValueError(f"{raw!r} must be a file name, not a path")
        return cls(raw)

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Package-qualified names
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Variable:
    """A configuration variable, global (``prefix``) or package-scoped (``lwt:lib``)."""

    name: str
    package: PackageName | None = None

    @classmethod
    def of_string(cls, raw: str) -> Variable:
        _require_token("variable", raw)
        package, sep, name = raw.rpartition(":")
        if not sep:
            return cls(name=raw)
        if not name:
            raise ValueError(f"variable {raw!r} has an empty name")
        return cls(name=name, package=PackageName.of_string(package))

    def __str__(self) -> str:
        if self.package is None:
            return self.name
        return f"{self.package}:{self.name}"


@dataclass(frozen=True, slots=True)
class Section:
    """A library or syntax section of a package (``lwt`` or ``lwt:lwt.unix``)."""

    package: PackageName
    section: str | None = None

    @classmethod
    def of_string(cls, raw: str) -> Section:
        _require_token("section", raw)
        package, sep, section = raw.partition(":")
        if not sep:
            return cls(package=PackageName.of_string(raw))
        if not section:
            raise ValueError(f"section {raw!r} has an empty section name")
        return cls(package=PackageName.of_string(package), section=section)

    def __str__(self) -> str:
        if self.section is None:
            return str(self.package)
        return f"{self.package}:{self.section}"


# ---------------------------------------------------------------------------
# Repository kinds
# ---------------------------------------------------------------------------

class RepositoryKind(str, Enum):
    """Closed set of repository backends."""

    HTTP = "http"
    LOCAL = "local"
    RSYNC = "rsync"
    GIT = "git"

    @classmethod
    def of_string(cls, raw: str) -> RepositoryKind:
        """Parse a kind token; ``curl`` and ``wget`` select the HTTP backend."""
        try:
            return cls(_KIND_SYNONYMS.get(raw, raw))
        except ValueError:
            accepted = ", ".join(KIND_TOKENS)
            raise ValueError(
                f"invalid repository kind {raw!r} (expected one of {accepted})"
            ) from None

    def __str__(self) -> str:
        return self.value


_KIND_SYNONYMS: dict[str, str] = {"curl": "http", "wget": "http"}

KIND_TOKENS: tuple[str, ...] = ("http", "curl", "wget", "local", "rsync", "git")
"""Every token accepted by :meth:`RepositoryKind.of_string`, in help order."""


# ---------------------------------------------------------------------------
# Composite values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Repository:
    """A fully resolved repository declaration."""

    name: RepositoryName
    kind: RepositoryKind
    address: Address
    priority: int = 0
