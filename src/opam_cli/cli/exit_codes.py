"""Process exit codes returned by the ``opam`` entry point.

Engines may also return their own code from ``Client.run``; any such
value is passed through unchanged.
"""

from __future__ import annotations

SUCCESS: int = 0
"""The action was handed to the engine and it reported success."""

GENERAL_ERROR: int = 1
"""Usage error or declared failure (``OpamCliError``); the message was printed."""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted by the user (128 + SIGINT).  Nothing is printed."""

UNEXPECTED_ERROR: int = 2
"""Unclassified failure; the command line was echoed before the error."""
