"""JSON output for ``--json`` and ``--json --pretty``."""

from __future__ import annotations

import json

from revman_cli.cli.console import console, write_plain
from revman_cli.core.models import ParsedDocument
from revman_cli.exceptions import EnvironmentError


def dump_compact(document: ParsedDocument) -> str:
    """Serialise *document* as tab-indented JSON."""
    return json.dumps(document, indent="\t", ensure_ascii=False)


def print_json(document: ParsedDocument, *, pretty: bool = False) -> None:
    """Write *document* to stdout.

    Compact output is written verbatim with no trailing newline.  Pretty
    output is a fully expanded, highlighted Rich dump with no depth limit.
    """
    if not pretty:
        write_plain(dump_compact(document))
        return

    try:
        from rich.pretty import Pretty
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc

    console.print(Pretty(document, max_depth=None, expand_all=True))
