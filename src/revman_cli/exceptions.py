"""Custom exception hierarchy for revman-cli.

All exceptions that cross layer boundaries must inherit from
:class:`RevmanCliError`.  Raw third-party exceptions (ElementTree,
Jinja2, ``OSError``) must NEVER propagate beyond the infrastructure
layer; they are caught there and re-raised as a typed subclass.

Hierarchy
---------
RevmanCliError
├── InvalidInvocationError
├── DocumentReadError
├── DocumentParseError
├── GenerationError
└── EnvironmentError
"""

from __future__ import annotations


class RevmanCliError(Exception):
    """Base exception for all revman-cli errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line ----------------------------------------------------------

class InvalidInvocationError(RevmanCliError):
    """Raised when the command line violates a usage constraint."""


# --- Input -----------------------------------------------------------------

class DocumentReadError(RevmanCliError):
    """Raised when the input file cannot be read."""


class DocumentParseError(RevmanCliError):
    """Raised when the input is not a well-formed RevMan document."""


# --- Abstract generation ---------------------------------------------------

class GenerationError(RevmanCliError):
    """Raised when the grammar engine fails to produce an abstract."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(RevmanCliError):
    """Raised when a required runtime dependency is not available."""
