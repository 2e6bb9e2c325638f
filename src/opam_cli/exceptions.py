"""Custom exception hierarchy for opam-cli.

All exceptions that cross layer boundaries must inherit from
:class:`OpamCliError`.  The CLI error boundary maps every subclass to
exit code ``1``; anything else that escapes is an unclassified failure.

Hierarchy
---------
OpamCliError
├── UsageError
├── DomainFailure
└── EnvironmentError
"""

from __future__ import annotations


class OpamCliError(Exception):
    """Base exception for all opam-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Parsing / routing -----------------------------------------------------

class UsageError(OpamCliError):
    """Raised when command-line input cannot be turned into an action.

    Covers malformed option values, unknown commands and sub-verbs,
    wrong positional arity and unconvertible tokens.  Always raised
    before the collaborator is invoked.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        usage: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.usage: str | None = usage
        """Usage line of the command that rejected the input, if known."""


# --- Handlers ---------------------------------------------------------------

class DomainFailure(OpamCliError):
    """Raised by a handler for a clearly identified, named precondition."""


# --- Environment / tooling --------------------------------------------------

class EnvironmentError(OpamCliError):
    """Raised when a required runtime dependency is not available."""
