"""Command-line validation.

Turns raw parsed arguments into an immutable :class:`Invocation`, or
raises :class:`InvalidInvocationError` before any file is touched.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from revman_cli.core.models import Invocation, RenderMode
from revman_cli.exceptions import InvalidInvocationError

USAGE_HINT: str = "Usage: revman <file> [--tree | --replicant | --json] [options]"


def build_invocation(
    files: Sequence[str],
    *,
    tree: bool = False,
    replicant: bool = False,
    json: bool = False,
    verify: bool = False,
    pretty: bool = False,
    grammar: str | None = None,
    show_studies: bool = False,
    verbose: bool = False,
    color: bool = True,
) -> Invocation:
    """Validate the command line and build an :class:`Invocation`.

    Checks run in order: file count, then presence of a mode, then mode
    exclusivity.  ``--verify`` suppresses rendering, so a render flag
    given alongside it is accepted but not acted upon.

    Raises
    ------
    InvalidInvocationError
        If any usage constraint is violated.
    """
    if len(files) != 1:
        raise InvalidInvocationError(
            "RevMan-Replicant needs exactly one RevMan file to work with",
            hint=USAGE_HINT,
        )

    selected = [
        mode
        for mode, enabled in (
            (RenderMode.TREE, tree),
            (RenderMode.REPLICANT, replicant),
            (RenderMode.JSON, json),
        )
        if enabled
    ]

    if not selected and not verify:
        raise InvalidInvocationError(
            "Specify at least --tree, --replicant or --json",
            hint=USAGE_HINT,
        )

    if len(selected) > 1:
        flags = ", ".join(f"--{mode.value}" for mode in selected)
        raise InvalidInvocationError(
            f"Only one output mode may be used at a time (got {flags})",
            hint=USAGE_HINT,
        )

    render_mode = None if verify else selected[0]

    return Invocation(
        path=Path(files[0]),
        render_mode=render_mode,
        pretty=pretty,
        grammar_path=Path(grammar) if grammar is not None else None,
        show_studies=show_studies,
        verify=verify,
        verbose=verbose,
        color=color,
    )
