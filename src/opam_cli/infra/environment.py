"""Infrastructure: initial configuration from ``OPAM*`` environment variables.

The returned :class:`~opam_cli.core.options.Configuration` is the value
command-line options are later applied to.  It is loaded once per
process, at the entry point.
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping

from opam_cli.core.options import Configuration

_FALSE_VALUES = frozenset({"", "0", "false", "no"})
_BSD_SYSTEMS = frozenset({"FreeBSD", "OpenBSD", "NetBSD", "DragonFly"})

DEFAULT_ROOT = "~/.opam"


def _flag(environ: Mapping[str, str], name: str) -> bool:
    value = environ.get(f"OPAM{name}")
    return value is not None and value.strip().lower() not in _FALSE_VALUES


def default_make_command() -> str:
    """``gmake`` on BSD systems, where ``make`` is not GNU make."""
    return "gmake" if platform.system() in _BSD_SYSTEMS else "make"


def load_configuration(environ: Mapping[str, str] | None = None) -> Configuration:
    """Build the initial configuration.

    Parameters
    ----------
    environ:
        Variables to read.  When ``None`` (default), ``os.environ`` is
        used.  Accepting a mapping enables deterministic testing.
    """
    env = os.environ if environ is None else environ
    return Configuration(
        root_dir=os.path.expanduser(env.get("OPAMROOT") or DEFAULT_ROOT),
        debug=_flag(env, "DEBUG"),
        verbose=_flag(env, "VERBOSE"),
        switch=env.get("OPAMSWITCH") or None,
        assume_yes=_flag(env, "YES"),
        keep_build_dir=_flag(env, "KEEPBUILDDIR"),
        verify_checksums=not _flag(env, "NOCHECKSUMS"),
        make_command=env.get("OPAMMAKECMD") or default_make_command(),
    )
