from pathlib import Path
from typing import Dict, List, Optional, Union

from hypothesis import settings

from repostamp_core.config import ConfigLoader, RepostampConfig
from repostamp_core.vcs.base import QueryOutcome, VcsQuery

# Prevent Hypothesis from writing a local example database (e.g. `.hypothesis/`) during tests.
settings.register_profile("repostamp-tests", database=None)
settings.load_profile("repostamp-tests")


ScriptValue = Union[str, QueryOutcome, None]


class ScriptedExecutor:
    """In-memory query executor returning scripted results.

    A string scripts a successful query, ``None`` (or a missing key) a failed
    one, and a ``QueryOutcome`` is returned as given. Every call is recorded.
    """

    def __init__(self, script: Optional[Dict[VcsQuery, ScriptValue]] = None) -> None:
        self.script: Dict[VcsQuery, ScriptValue] = dict(script or {})
        self.calls: List[VcsQuery] = []
        self.dirty_strings: List[str] = []

    def run(self, query: VcsQuery, repo_root: Path, *, dirty_string: str = "") -> QueryOutcome:
        self.calls.append(query)
        self.dirty_strings.append(dirty_string)
        value = self.script.get(query)
        if isinstance(value, QueryOutcome):
            return value
        if value is None:
            return QueryOutcome.failure(f"fatal: {query.value} not available")
        return QueryOutcome.success(value)


def scripted_repo(
    *,
    branch: ScriptValue = "develop",
    remote: ScriptValue = "git@example.com:acme/app.git",
    status: ScriptValue = "",
    commit: ScriptValue = "652c397",
    describe: ScriptValue = "0.1.5-42-g652c397",
    count: ScriptValue = "42",
) -> ScriptedExecutor:
    """Build a ScriptedExecutor for a healthy repository, overriding individual queries."""
    return ScriptedExecutor(
        {
            VcsQuery.CURRENT_BRANCH: branch,
            VcsQuery.REMOTE_URL: remote,
            VcsQuery.WORKING_TREE_STATUS: status,
            VcsQuery.SHORT_COMMIT_HASH: commit,
            VcsQuery.DESCRIBE: describe,
            VcsQuery.COMMIT_COUNT: count,
        }
    )


def make_config(**fallbacks: str) -> RepostampConfig:
    """Effective config with test-friendly fallbacks, optionally overridden."""
    values = {
        "dirty_string": "-DIRTY",
        "branch": "NOBRANCH",
        "commit": "NOCOMMIT",
        "commit_count": "NOCOUNT",
        "remote": "NOREMOTE",
        "semver": "0.0.0",
        "stage": "NOSTAGE",
        "status": "NOSTATUS",
        "tag": "NOTAG",
        "version": "NOVERSION",
    }
    values.update(fallbacks)
    return ConfigLoader.from_mapping({"fallbacks": values})


def write_config(path: Path, lines: List[str]) -> Path:
    """Write a TOML config file for tests."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines).strip() + "\n", encoding="utf-8")
    return path
