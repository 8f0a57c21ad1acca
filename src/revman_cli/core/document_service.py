"""Core document service — drives the injected document parser.

This is the service the CLI layer calls to turn raw text into a
:class:`~revman_cli.core.models.ParseResult`.  It depends on a
:class:`~revman_cli.core.protocols.DocumentParser` injected at
construction time, keeping the core free of any XML imports.

Guarantees
----------
* Pure orchestration — no I/O, no ``print()``.
* Only :class:`~revman_cli.exceptions.RevmanCliError` subclasses escape.
* Empty outcomes are always kept so the tree view can show them.
"""

from __future__ import annotations

from revman_cli.core.models import ParseOptions, ParseResult
from revman_cli.core.protocols import DocumentParser
from revman_cli.exceptions import DocumentParseError, RevmanCliError
from revman_cli.utils.log import get_logger

logger = get_logger(__name__)


class DocumentService:
    """Stateless service wrapping a :class:`DocumentParser`.

    Parameters
    ----------
    parser:
        Any object satisfying the :class:`DocumentParser` protocol.
    """

    def __init__(self, parser: DocumentParser) -> None:
        self._parser: DocumentParser = parser

    @staticmethod
    def build_options(*, debug_outcomes: bool) -> ParseOptions:
        """Return the parser options used for every run."""
        return ParseOptions(
            debug_outcomes=debug_outcomes,
            remove_empty_outcomes=False,
        )

    def parse(self, raw_text: str, *, debug_outcomes: bool = False) -> ParseResult:
        """Parse *raw_text* into a document plus warnings.

        Raises
        ------
        DocumentParseError
            If the parser rejects the input or fails unexpectedly.
        """
        options = self.build_options(debug_outcomes=debug_outcomes)
        try:
            result = self._parser.parse(raw_text, options)
        except RevmanCliError:
            raise
        except Exception as exc:
            raise DocumentParseError(
                f"Unexpected parser error: {exc}",
            ) from exc

        logger.debug("Parsed document with %d warning(s)", len(result.warnings))
        return result
