from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from repostamp_core.errors import RepositoryPathError

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_stdio() -> None:
    """Make CLI output robust across Windows console encodings.

    Some Windows terminals use a non-UTF8 encoding (e.g., cp1252). Remote URLs
    and branch names can carry characters those encodings cannot represent,
    so configure stdout/stderr to replace unencodable characters instead of
    aborting the run.
    """

    if os.name != "nt":
        return

    for stream in (sys.stdout, sys.stderr):
        try:
            # Keep the current encoding, but make encoding errors non-fatal.
            stream.reconfigure(errors="replace")
        except AttributeError:
            continue


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr; stdout is reserved for the descriptor."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def resolve_repo_path(raw: str) -> Path:
    """Return the absolute repository path or raise ``RepositoryPathError``."""
    path = Path(raw).expanduser()
    if not path.exists():
        raise RepositoryPathError(path, "does not exist")
    if not path.is_dir():
        raise RepositoryPathError(path, "is not a directory")
    return path.resolve()
