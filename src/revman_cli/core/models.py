"""Domain models for revman-cli.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond data access.  The parsed document itself stays a plain
nested mapping, exactly as the parser returns it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

ParsedDocument = dict[str, Any]
"""Acyclic nested mapping produced by a :class:`DocumentParser`."""


# ---------------------------------------------------------------------------
# Invocation
# ---------------------------------------------------------------------------

class RenderMode(str, enum.Enum):
    """The output renderers, of which at most one runs per invocation."""

    TREE = "tree"
    REPLICANT = "replicant"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class Invocation:
    """Validated command-line options for a single run."""

    path: Path
    """The RevMan file to read."""

    render_mode: RenderMode | None
    """Selected renderer, or ``None`` when only verifying."""

    pretty: bool = False
    """Pretty-print JSON output (only meaningful in JSON mode)."""

    grammar_path: Path | None = None
    """Grammar override for the abstract generator."""

    show_studies: bool = False
    """List individual studies in tree mode."""

    verify: bool = False
    """Validate the file without rendering."""

    verbose: bool = False
    """Scan outcomes in detail and always report validity."""

    color: bool = True
    """Whether ANSI color may be emitted."""

    @property
    def reports_validity(self) -> bool:
        """Whether the validity report is printed before rendering."""
        return self.verify or self.verbose

    @property
    def debug_outcomes(self) -> bool:
        """Whether the parser should run its detailed outcome scan."""
        return self.verify or self.verbose


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Behavioural knobs handed to the document parser."""

    debug_outcomes: bool = False
    """Scan outcomes for structural anomalies and report them as warnings."""

    remove_empty_outcomes: bool = False
    """Drop outcomes that carry no study data."""


@dataclass(frozen=True, slots=True)
class ParseResult:
    """A parsed document together with its non-fatal warnings."""

    document: ParsedDocument
    warnings: tuple[str, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Tree view
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TreeLine:
    """One presentational line of the comparison/outcome tree."""

    kind: str
    """``"comparison"``, ``"outcome"``, ``"subgroup"``, ``"study"`` or ``"blank"``."""

    depth: int = 0
    label: str = ""
    text: str = ""
    note: str = ""
