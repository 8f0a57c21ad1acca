"""Core abstract service — drives the injected abstract generator.

Guarantees
----------
* Pure orchestration — no I/O, no ``print()``.
* Only :class:`~revman_cli.exceptions.RevmanCliError` subclasses escape.
"""

from __future__ import annotations

from pathlib import Path

from revman_cli.core.models import ParsedDocument
from revman_cli.core.protocols import AbstractGenerator
from revman_cli.exceptions import GenerationError, RevmanCliError


class AbstractService:
    """Stateless service wrapping an :class:`AbstractGenerator`.

    Parameters
    ----------
    generator:
        Any object satisfying the :class:`AbstractGenerator` protocol.
    """

    def __init__(self, generator: AbstractGenerator) -> None:
        self._generator: AbstractGenerator = generator

    def generate(
        self,
        document: ParsedDocument,
        grammar_path: Path | None = None,
    ) -> str:
        """Generate the abstract text for *document*.

        Raises
        ------
        GenerationError
            If the generator fails for any reason.
        """
        try:
            return self._generator.generate(document, grammar_path)
        except RevmanCliError:
            raise
        except Exception as exc:
            raise GenerationError(
                f"Unexpected generator error: {exc}",
            ) from exc
