"""Executor detection."""

import logging
import shutil
from typing import Optional

from .base import QueryExecutor
from .git_adapter import GitExecutor
from .null_adapter import NullExecutor

logger = logging.getLogger(__name__)


def detect_executor(git: Optional[str] = None) -> QueryExecutor:
    """Return a git executor when git is installed, otherwise a null executor."""
    git_path = git or shutil.which("git")
    if git_path:
        return GitExecutor(git_path)

    logger.warning("git executable not found on PATH; every field will use its fallback")
    return NullExecutor()
