"""Inference policies for values the user may leave implicit.

When no ``--kind`` is given, the kind of a repository (or of a pin
target) is inferred from its address.  The precedence is fixed:

1. an address that exists on the local filesystem is ``local``;
2. an address starting or ending with ``git`` is ``git``;
3. anything else gets the configured default kind.

A local directory whose name happens to end in ``git`` is therefore
``local``, never ``git``.  Filesystem probes are injected so this
module performs no I/O of its own.
"""

from __future__ import annotations

from collections.abc import Callable

from opam_cli.core.actions import PinGit, PinPath, PinTarget, PinVersion, Unpin
from opam_cli.core.models import Address, RepositoryKind

Probe = Callable[[str], bool]
"""``exists(path) -> bool``."""

UNPIN_TOKEN = "none"


def is_git_shaped(address: str) -> bool:
    return address.startswith("git") or address.endswith("git")


def guess_repository_kind(
    kind: RepositoryKind | None,
    address: Address,
    *,
    default: RepositoryKind,
    exists: Probe,
) -> RepositoryKind:
    """Return *kind* when given, otherwise infer it from *address*."""
    if kind is not None:
        return kind
    raw = str(address)
    if exists(raw):
        return RepositoryKind.LOCAL
    if is_git_shaped(raw):
        return RepositoryKind.GIT
    return default


def repository_address(
    address: Address,
    *,
    exists: Probe,
    real_path: Callable[[str], str],
) -> Address:
    """Canonicalise a repository address: existing local paths become real paths."""
    raw = str(address)
    if exists(raw):
        return Address(real_path(raw))
    return address


def _pin_version(raw: str) -> PinVersion:
    if not raw:
        raise ValueError("empty version")
    if any(ch.isspace() for ch in raw):
        raise ValueError(f"version {raw!r} must not contain whitespace")
    return PinVersion(raw)


def pin_target(
    raw: str,
    kind: RepositoryKind | None,
    *,
    exists: Probe,
) -> PinTarget:
    """Interpret the second ``pin`` argument.

    ``none`` always unpins.  An explicit ``git`` kind pins to a git
    address, ``local`` or ``rsync`` pins to a path.  Without a usable
    kind the repository precedence applies, with a version pin as the
    final fallback.

    Raises :class:`ValueError` when *raw* is not a valid address or
    version.
    """
    if raw == UNPIN_TOKEN:
        return Unpin()
    if kind is RepositoryKind.GIT:
        return PinGit(Address.of_string(raw))
    if kind in (RepositoryKind.LOCAL, RepositoryKind.RSYNC):
        return PinPath(Address.of_string(raw))
    if exists(raw):
        return PinPath(Address.of_string(raw))
    if is_git_shaped(raw):
        return PinGit(Address.of_string(raw))
    return _pin_version(raw)
