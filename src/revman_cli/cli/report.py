"""Validity report printed in ``--verify`` and ``--verbose`` modes."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from revman_cli.cli.console import console, get_text_class, write_plain


def print_validity_report(path: Path, warnings: Sequence[str]) -> None:
    """Print that *path* parsed, followed by its warnings in order."""
    Text = get_text_class()

    line = Text.assemble(str(path), " - ", ("RevMan file is valid", "green"))
    if warnings:
        line.append(" (")
        line.append(f"{len(warnings)} warnings", style="red")
        line.append("):")
    console.print(line)

    for warning in warnings:
        write_plain(f"\t- {warning}\n")
