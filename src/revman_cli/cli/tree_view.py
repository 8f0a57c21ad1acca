"""Rich rendering of the comparison/outcome tree.

The lines themselves come from :func:`revman_cli.core.tree.build_tree_lines`;
this module only decides how each kind of line looks.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from revman_cli.cli.console import console, get_text_class
from revman_cli.core.models import ParsedDocument, TreeLine
from revman_cli.core.tree import build_tree_lines

LABEL_STYLE: str = "grey50"
COMPARISON_STYLE: str = "bold blue"


def render_line(line: TreeLine) -> Any:
    """Return a Rich ``Text`` for one tree line."""
    Text = get_text_class()

    if line.kind == "blank":
        return Text()
    if line.kind == "comparison":
        return Text(f"* {line.text}", style=COMPARISON_STYLE)

    text = Text("  " * line.depth + "- ")
    text.append(line.label, style=LABEL_STYLE)
    text.append(f" {line.text}")
    if line.note:
        text.append(f" {line.note}", style=LABEL_STYLE)
    return text


def print_tree_lines(lines: Sequence[TreeLine]) -> None:
    for line in lines:
        console.print(render_line(line))


def print_tree(document: ParsedDocument, *, show_studies: bool = False) -> None:
    """Print every comparison, outcome and subgroup of *document*."""
    print_tree_lines(build_tree_lines(document, show_studies=show_studies))
