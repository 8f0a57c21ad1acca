"""Pure construction of the comparison/outcome tree view.

Every function in this module is a **pure** transformation of the
parsed document: no I/O, no mutation, fully deterministic.

Numbering
---------
* Outcome:  ``<comparison index+1>.<outcome index+1>``
* Subgroup: ``<outcome label>.<subgroup declared number>``
* Study:    ``<parent label>.<study index+1>``

Every numeric component after the first is zero-padded to two digits.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from revman_cli.core.models import ParsedDocument, TreeLine

LABEL_WIDTH: int = 2


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

def pad(value: object, width: int = LABEL_WIDTH) -> str:
    """Left-pad ``str(value)`` with zeros to *width* characters."""
    return str(value).rjust(width, "0")


def outcome_label(comparison_index: int, outcome_index: int) -> str:
    """Return the label for a zero-based comparison/outcome position."""
    return f"{comparison_index + 1}.{pad(outcome_index + 1)}"


def child_label(parent_label: str, number: object) -> str:
    """Extend *parent_label* with one more padded component."""
    return f"{parent_label}.{pad(number)}"


# ---------------------------------------------------------------------------
# Document access
# ---------------------------------------------------------------------------

def _children(node: Mapping[str, Any], key: str) -> Sequence[Mapping[str, Any]]:
    """Return the list stored under *key*, or an empty tuple."""
    value = node.get(key)
    if isinstance(value, list):
        return value
    return ()


def comparisons(document: ParsedDocument) -> Sequence[Mapping[str, Any]]:
    """Return the document's comparisons in document order."""
    analyses = document.get("analyses_and_data")
    if not isinstance(analyses, Mapping):
        return ()
    return _children(analyses, "comparison")


# ---------------------------------------------------------------------------
# Tree construction
# ---------------------------------------------------------------------------

def _study_lines(
    studies: Sequence[Mapping[str, Any]],
    parent_label: str,
    depth: int,
) -> list[TreeLine]:
    return [
        TreeLine(
            kind="study",
            depth=depth,
            label=child_label(parent_label, index + 1),
            text=str(study.get("study_id", "")),
        )
        for index, study in enumerate(studies)
    ]


def _outcome_lines(
    outcome: Mapping[str, Any],
    label: str,
    *,
    show_studies: bool,
) -> list[TreeLine]:
    studies = _children(outcome, "study")
    subgroups = _children(outcome, "subgroup")

    note = f"({len(studies)} studies)" if studies and not subgroups else ""
    lines = [
        TreeLine(
            kind="outcome",
            depth=1,
            label=label,
            text=str(outcome.get("name", "")),
            note=note,
        )
    ]

    if subgroups:
        for subgroup in subgroups:
            subgroup_label = child_label(label, subgroup.get("no", ""))
            subgroup_studies = _children(subgroup, "study")
            lines.append(
                TreeLine(
                    kind="subgroup",
                    depth=2,
                    label=subgroup_label,
                    text=str(subgroup.get("name", "")),
                    note=f"(subgroup; {len(subgroup_studies)} studies)",
                )
            )
            if show_studies:
                lines.extend(_study_lines(subgroup_studies, subgroup_label, 3))
    elif show_studies:
        lines.extend(_study_lines(studies, label, 2))

    return lines


def build_tree_lines(
    document: ParsedDocument,
    *,
    show_studies: bool = False,
) -> list[TreeLine]:
    """Flatten *document* into the lines of the tree view.

    A ``"blank"`` line separates consecutive comparisons; none follows
    the last one.
    """
    items = comparisons(document)
    lines: list[TreeLine] = []

    for comparison_index, comparison in enumerate(items):
        lines.append(
            TreeLine(kind="comparison", text=str(comparison.get("name", "")))
        )
        for outcome_index, outcome in enumerate(_children(comparison, "outcome")):
            lines.extend(
                _outcome_lines(
                    outcome,
                    outcome_label(comparison_index, outcome_index),
                    show_studies=show_studies,
                )
            )
        if comparison_index < len(items) - 1:
            lines.append(TreeLine(kind="blank"))

    return lines
