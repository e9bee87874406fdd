"""VCS query base types."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol


class VcsQuery(str, Enum):
    """Named version-control queries needed to describe a working copy."""

    CURRENT_BRANCH = "current-branch"
    REMOTE_URL = "remote-url"
    WORKING_TREE_STATUS = "working-tree-status"
    SHORT_COMMIT_HASH = "short-commit-hash"
    DESCRIBE = "describe"
    COMMIT_COUNT = "commit-count"


@dataclass(frozen=True)
class QueryOutcome:
    """Result of one query: raw text on success, original error text on failure."""

    ok: bool
    value: str = ""
    error: Optional[str] = None

    @classmethod
    def success(cls, value: str) -> "QueryOutcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "QueryOutcome":
        # An empty stderr still has to read as a failure in diagnostics.
        return cls(ok=False, error=error.strip() or "query failed without output")


class QueryExecutor(Protocol):
    """Executor protocol; the only place that talks to the version-control tool."""

    def run(self, query: VcsQuery, repo_root: Path, *, dirty_string: str = "") -> QueryOutcome:
        """Run a named query against ``repo_root``.

        ``dirty_string`` is only used by ``VcsQuery.DESCRIBE``. Failures are
        returned, never raised.
        """
        ...
