"""Null executor for environments without a version-control tool."""

from pathlib import Path

from .base import QueryOutcome, VcsQuery

NO_VCS_MESSAGE = "no version control tool available"


class NullExecutor:
    """Executor that fails every query, yielding an all-fallback descriptor."""

    def run(self, query: VcsQuery, repo_root: Path, *, dirty_string: str = "") -> QueryOutcome:
        """Always fail."""
        return QueryOutcome.failure(f"{query.value}: {NO_VCS_MESSAGE}")
