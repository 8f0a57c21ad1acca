"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from revman_cli.core.models import ParsedDocument, ParseOptions, ParseResult


class DocumentParser(Protocol):
    """Contract for RevMan document parsers.

    Any object that implements :meth:`parse` with the correct signature
    satisfies this protocol structurally (no explicit inheritance
    required).
    """

    def parse(self, raw_text: str, options: ParseOptions) -> ParseResult:
        """Parse *raw_text* into a document and a list of warnings.

        The returned document must contain ``analyses_and_data`` with a
        ``comparison`` list; comparisons carry ``outcome`` lists, outcomes
        carry ``study`` and ``subgroup`` lists.

        Raises
        ------
        DocumentParseError
            When *raw_text* is not a well-formed document.
        """
        ...  # pragma: no cover


class AbstractGenerator(Protocol):
    """Contract for abstract (replicant) generation engines."""

    def generate(
        self,
        document: ParsedDocument,
        grammar_path: Path | None = None,
    ) -> str:
        """Render *document* to prose using the grammar at *grammar_path*.

        ``None`` selects the engine's built-in default grammar.

        Raises
        ------
        GenerationError
            When the grammar is unusable or the document lacks a field
            the grammar requires.
        """
        ...  # pragma: no cover
