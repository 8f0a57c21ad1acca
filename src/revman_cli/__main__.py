"""Allow ``python -m revman_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m revman_cli`` behaves identically to the ``revman``
console script.
"""

from __future__ import annotations

from revman_cli.cli.app import cli

if __name__ == "__main__":
    cli()
