"""Allow ``python -m opam_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m opam_cli`` behaves identically to the ``opam``
console script.
"""

from __future__ import annotations

from opam_cli.cli.app import cli

if __name__ == "__main__":
    cli()
