"""revman-cli — inspect RevMan systematic-review files from the terminal.

Renders a RevMan 5 export as a tree, as JSON, or as a generated abstract.
"""

from revman_cli.version import __version__

__all__: list[str] = ["__version__"]
