"""Core / service layer — pure validation and orchestration logic.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
"""

from revman_cli.core.abstract_service import AbstractService
from revman_cli.core.document_service import DocumentService
from revman_cli.core.invocation import build_invocation
from revman_cli.core.models import (
    Invocation,
    ParsedDocument,
    ParseOptions,
    ParseResult,
    RenderMode,
    TreeLine,
)
from revman_cli.core.protocols import AbstractGenerator, DocumentParser
from revman_cli.core.tree import build_tree_lines

__all__: list[str] = [
    "AbstractGenerator",
    "AbstractService",
    "DocumentParser",
    "DocumentService",
    "Invocation",
    "ParseOptions",
    "ParseResult",
    "ParsedDocument",
    "RenderMode",
    "TreeLine",
    "build_invocation",
    "build_tree_lines",
]
