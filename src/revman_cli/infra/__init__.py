"""Infrastructure layer — external system integration.

This layer wraps all interaction with the filesystem, the XML parser
and the Jinja2 template engine.  Every raw third-party exception must
be caught here and re-raised as a
:class:`~revman_cli.exceptions.RevmanCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from revman_cli.infra.file_reader import read_document
from revman_cli.infra.replicant_generator import JinjaAbstractGenerator, resolve_grammar_path
from revman_cli.infra.revman_parser import RevManXmlParser

__all__: list[str] = [
    "JinjaAbstractGenerator",
    "RevManXmlParser",
    "read_document",
    "resolve_grammar_path",
]
