"""Jinja2 backed implementation of :class:`~revman_cli.core.protocols.AbstractGenerator`.

A grammar is a Jinja2 template.  It receives the parsed document as
``revman`` (alias ``document``) and a handful of helpers for writing
prose about comparisons and studies.

This module is the **only** place in the codebase that imports
``jinja2``.  All Jinja2 exceptions are caught here and re-raised as
:class:`~revman_cli.exceptions.GenerationError`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from revman_cli.core.models import ParsedDocument
from revman_cli.core.tree import comparisons, pad
from revman_cli.exceptions import EnvironmentError, GenerationError
from revman_cli.utils.log import get_logger

logger = get_logger(__name__)

GRAMMAR_ENV_VAR: str = "REVMAN_CLI_GRAMMAR"
DEFAULT_GRAMMAR: Path = Path(__file__).resolve().parent.parent / "grammars" / "hal-en.j2"


def resolve_grammar_path(override: Path | None = None) -> Path:
    """Return the grammar to use: *override*, then the env var, then the default."""
    if override is not None:
        return override
    from_env = os.getenv(GRAMMAR_ENV_VAR, "").strip()
    if from_env:
        return Path(from_env)
    return DEFAULT_GRAMMAR


# ---------------------------------------------------------------------------
# Template helpers
# ---------------------------------------------------------------------------

def plural(word: str, count: int) -> str:
    """Return *word* pluralised unless *count* is exactly one."""
    if count == 1:
        return word
    if word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u"):
        return word[:-1] + "ies"
    return word + "s"


def _node_study_ids(node: Mapping[str, Any]) -> list[Any]:
    ids = [study.get("study_id") for study in node.get("study") or ()]
    for subgroup in node.get("subgroup") or ():
        ids.extend(study.get("study_id") for study in subgroup.get("study") or ())
    return ids


def study_count(node: Mapping[str, Any]) -> int:
    """Count the distinct studies contributing to an outcome or subgroup."""
    return len(set(_node_study_ids(node)))


def unique_study_ids(document: ParsedDocument) -> list[Any]:
    """Return every study id used in the analyses, in first-seen order."""
    seen: dict[Any, None] = {}
    for comparison in comparisons(document):
        for outcome in comparison.get("outcome") or ():
            for study_id in _node_study_ids(outcome):
                seen.setdefault(study_id, None)
    return list(seen)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class JinjaAbstractGenerator:
    """Concrete :class:`AbstractGenerator` backed by Jinja2.

    Undefined variables are errors (``StrictUndefined``), so a grammar
    that needs a field the document lacks fails instead of printing a
    gap in the prose.
    """

    @staticmethod
    def _build_env(grammar_dir: Path) -> Any:
        try:
            from jinja2 import Environment, FileSystemLoader, StrictUndefined
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "jinja2 is not installed. Install with: pip install jinja2",
            ) from exc

        env = Environment(
            loader=FileSystemLoader(str(grammar_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )
        env.filters["plural"] = plural
        env.filters["pad"] = pad
        env.filters["study_count"] = study_count
        env.globals["unique_study_ids"] = unique_study_ids
        return env

    def generate(
        self,
        document: ParsedDocument,
        grammar_path: Path | None = None,
    ) -> str:
        """Render *document* through the grammar at *grammar_path*.

        Raises
        ------
        GenerationError
            If the grammar is missing, malformed, or references a field
            the document does not have.
        """
        grammar = resolve_grammar_path(grammar_path)
        if not grammar.is_file():
            raise GenerationError(
                f"Grammar file not found: {grammar}",
                hint="Pass an existing template with --grammar.",
            )

        env = self._build_env(grammar.resolve().parent)

        from jinja2 import TemplateError, TemplateSyntaxError, UndefinedError

        logger.debug("Rendering abstract with grammar %s", grammar)
        try:
            template = env.get_template(grammar.name)
            text = template.render(revman=document, document=document)
        except TemplateSyntaxError as exc:
            raise GenerationError(
                f"Invalid grammar {grammar} (line {exc.lineno}): {exc.message}",
            ) from exc
        except UndefinedError as exc:
            raise GenerationError(
                f"Document is missing a field required by the grammar: {exc.message}",
            ) from exc
        except TemplateError as exc:
            raise GenerationError(f"Grammar {grammar} failed: {exc}") from exc

        return text.removesuffix("\n")
