"""Core layer — typed domain values and the engine contract.

Rules
-----
* No ``print()`` calls.
* No filesystem or environment access (probes are injected).
* No imports from ``cli`` or ``infra``.
"""

from opam_cli.core.options import BuildOptions, Configuration, GlobalOptions
from opam_cli.core.protocols import Client, Session

__all__: list[str] = [
    "BuildOptions",
    "Client",
    "Configuration",
    "GlobalOptions",
    "Session",
]
