"""opam-cli — declarative command-line front end for the opam package manager.

Turns raw process arguments into validated, typed actions and hands each
one to a package-management engine through a narrow protocol.
"""

from opam_cli.version import __version__

__all__: list[str] = ["__version__"]
