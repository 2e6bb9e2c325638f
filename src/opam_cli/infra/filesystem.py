"""Infrastructure: filesystem probes used by kind inference.

Rules
-----
* Read-only: nothing here creates, modifies or deletes files.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

import os


def path_exists(path: str) -> bool:
    """Return whether *path* names an existing file or directory."""
    return os.path.exists(os.path.expanduser(path))


def real_path(path: str) -> str:
    """Absolute, symlink-free form of *path* (``~`` expanded)."""
    return os.path.realpath(os.path.expanduser(path))
