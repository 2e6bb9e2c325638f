"""Infrastructure layer — operating-system integration.

This layer wraps every interaction with the environment and the
filesystem.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the CLI layer.
"""

from opam_cli.infra.environment import load_configuration
from opam_cli.infra.filesystem import path_exists, real_path

__all__: list[str] = [
    "load_configuration",
    "path_exists",
    "real_path",
]
