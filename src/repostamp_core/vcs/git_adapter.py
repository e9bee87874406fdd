"""Git query executor."""

import logging
import subprocess
from pathlib import Path
from typing import List

from .base import QueryOutcome, VcsQuery

logger = logging.getLogger(__name__)


class GitExecutor:
    """Git query executor backed by the ``git`` command line."""

    def __init__(self, git: str = "git") -> None:
        self.git = git

    def command(self, query: VcsQuery, dirty_string: str = "") -> List[str]:
        """Return the argv used for ``query``."""
        if query is VcsQuery.CURRENT_BRANCH:
            args = ["rev-parse", "--abbrev-ref", "HEAD"]
        elif query is VcsQuery.REMOTE_URL:
            args = ["config", "--get", "remote.origin.url"]
        elif query is VcsQuery.WORKING_TREE_STATUS:
            args = ["status", "--porcelain"]
        elif query is VcsQuery.SHORT_COMMIT_HASH:
            args = ["rev-parse", "--short", "HEAD"]
        elif query is VcsQuery.DESCRIBE:
            args = ["describe", "--tags", "--always"]
            if dirty_string:
                args.append(f"--dirty={dirty_string}")
        elif query is VcsQuery.COMMIT_COUNT:
            args = ["rev-list", "--count", "HEAD"]
        else:
            raise ValueError(f"Unsupported query: {query!r}")
        return [self.git, *args]

    def run(self, query: VcsQuery, repo_root: Path, *, dirty_string: str = "") -> QueryOutcome:
        """Run ``query`` in ``repo_root`` and capture its stripped stdout."""
        argv = self.command(query, dirty_string)
        logger.debug(f"Running {' '.join(argv)} in {repo_root}")
        try:
            result = subprocess.run(
                argv,
                cwd=str(repo_root),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            return QueryOutcome.failure(f"{self.git}: {e}")

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            return QueryOutcome.failure(stderr or f"{' '.join(argv)} exited with status {result.returncode}")

        return QueryOutcome.success(result.stdout.strip())
