"""CLI application entry point and pipeline for revman-cli.

This module is the **sole error boundary** for the entire application.
It catches :class:`~revman_cli.exceptions.RevmanCliError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Pipeline
--------
Validate → Acquire → Parse → [Report validity] → {Tree | Replicant | JSON}

Each stage runs at most once; the first error aborts the rest.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import NoReturn

from revman_cli.cli import exit_codes
from revman_cli.cli.console import console, get_text_class, write_plain
from revman_cli.core.invocation import USAGE_HINT, build_invocation
from revman_cli.core.models import Invocation, ParsedDocument, RenderMode
from revman_cli.exceptions import InvalidInvocationError, RevmanCliError
from revman_cli.utils.log import get_logger, setup_logger
from revman_cli.version import __version__

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors as ``InvalidInvocationError``."""

    def error(self, message: str) -> NoReturn:
        raise InvalidInvocationError(message, hint=USAGE_HINT)


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser."""
    parser = _ArgumentParser(
        prog="revman",
        usage="%(prog)s <file> [--tree | --replicant | --json] [options]",
        description="Inspect a RevMan systematic-review file.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="file",
        help="RevMan (.rm5) file to read.",
    )
    parser.add_argument(
        "-j", "--json", action="store_true",
        help="Output RevMan JSON structure.",
    )
    parser.add_argument(
        "-p", "--pretty", action="store_true",
        help="When using --json, pretty print the structure.",
    )
    parser.add_argument(
        "-r", "--replicant", action="store_true",
        help="Generate an abstract from the RevMan file.",
    )
    parser.add_argument(
        "--grammar", metavar="FILE", default=None,
        help="Use the specified grammar file to generate --replicant output.",
    )
    parser.add_argument(
        "-t", "--tree", action="store_true",
        help="Output a tree of all comparisons, outcomes, subgroups and studies.",
    )
    parser.add_argument(
        "--ss", "--show-studies", dest="show_studies", action="store_true",
        help="Show the studies when in --tree mode.",
    )
    parser.add_argument(
        "--verify", action="store_true",
        help="Don't generate output, just verify that the file is valid.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Be verbose.",
    )
    parser.add_argument(
        "--no-color", dest="color", action="store_false",
        help="Force disable color.",
    )
    return parser


def parse_invocation(argv: Sequence[str] | None = None) -> Invocation:
    """Parse *argv* and validate it into an :class:`Invocation`.

    Console color is settled before validation so usage errors honour
    ``--no-color`` as well.
    """
    raw_args = sys.argv[1:] if argv is None else list(argv)
    if "--no-color" in raw_args:
        console.configure(color=False)
    args = _build_parser().parse_args(raw_args)
    console.configure(color=args.color)
    return build_invocation(
        args.files,
        tree=args.tree,
        replicant=args.replicant,
        json=args.json,
        verify=args.verify,
        pretty=args.pretty,
        grammar=args.grammar,
        show_studies=args.show_studies,
        verbose=args.verbose,
        color=args.color,
    )


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def _render_tree(invocation: Invocation, document: ParsedDocument) -> None:
    from revman_cli.cli.tree_view import print_tree

    print_tree(document, show_studies=invocation.show_studies)


def _render_replicant(invocation: Invocation, document: ParsedDocument) -> None:
    from revman_cli.core.abstract_service import AbstractService
    from revman_cli.infra.replicant_generator import JinjaAbstractGenerator

    service = AbstractService(JinjaAbstractGenerator())
    text = service.generate(document, invocation.grammar_path)
    write_plain(text + "\n")


def _render_json(invocation: Invocation, document: ParsedDocument) -> None:
    from revman_cli.cli.json_view import print_json

    print_json(document, pretty=invocation.pretty)


_RENDERERS = {
    RenderMode.TREE: _render_tree,
    RenderMode.REPLICANT: _render_replicant,
    RenderMode.JSON: _render_json,
}


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def _run(invocation: Invocation) -> int:
    """Run the read → parse → report → render pipeline for one file."""
    from revman_cli.cli.report import print_validity_report
    from revman_cli.core.document_service import DocumentService
    from revman_cli.infra.file_reader import read_document
    from revman_cli.infra.revman_parser import RevManXmlParser

    raw_text = read_document(invocation.path)

    service = DocumentService(RevManXmlParser())
    result = service.parse(raw_text, debug_outcomes=invocation.debug_outcomes)

    if invocation.reports_validity:
        print_validity_report(invocation.path, result.warnings)

    if invocation.render_mode is not None:
        logger.debug("Rendering %s output", invocation.render_mode.value)
        _RENDERERS[invocation.render_mode](invocation, result.document)

    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the revman CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    RevmanCliError
        For any validation, I/O, parse or generation failure.
    """
    invocation = parse_invocation(argv)
    setup_logger("DEBUG" if invocation.verbose else "WARNING")
    return _run(invocation)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _print_error(message: str, hint: str | None = None) -> None:
    Text = get_text_class()

    console.print(Text.assemble(("Error:", "bold red"), " ", message))
    if hint:
        console.print(Text.assemble(("Hint:", "yellow"), " ", hint))


def cli(argv: list[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except RevmanCliError as exc:
        _print_error(str(exc), exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        _print_error(
            "Unexpected error. Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.GENERAL_ERROR)
