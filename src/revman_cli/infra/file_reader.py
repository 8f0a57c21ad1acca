"""Infrastructure: reading the input document from disk.

Rules
-----
* The file handle is scoped to :func:`read_document` only.
* ``OSError`` and decoding failures are re-raised as
  :class:`~revman_cli.exceptions.DocumentReadError`.
"""

from __future__ import annotations

from pathlib import Path

from revman_cli.exceptions import DocumentReadError
from revman_cli.utils.log import get_logger

logger = get_logger(__name__)


def read_document(path: Path, *, encoding: str = "utf-8") -> str:
    """Return the full contents of *path* as text.

    Raises
    ------
    DocumentReadError
        If the file is missing, unreadable or not valid *encoding*.
    """
    try:
        with open(path, encoding=encoding) as handle:
            text = handle.read()
    except FileNotFoundError as exc:
        raise DocumentReadError(
            f"File not found: {path}",
            hint="Check the path to the RevMan file.",
        ) from exc
    except OSError as exc:
        raise DocumentReadError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise DocumentReadError(
            f"Cannot decode {path} as {encoding}: {exc.reason}",
        ) from exc

    logger.debug("Read %d characters from %s", len(text), path)
    return text
