"""
descriptor.py - Derive a RepoDescriptor for one working copy.

Each call starts from an empty DescriptorBuilder and a fresh FallbackPolicy,
so no value can carry over from a previous run in the same process.

Step order (later steps depend on earlier ones):
    branch -> stage -> release-branch semver -> describe reconciliation
    -> remote -> dirty status -> commit
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Mapping, Optional, Union

from repostamp_core.branch import resolve_branch
from repostamp_core.config import RepostampConfig
from repostamp_core.describe import reconcile_describe
from repostamp_core.dirty import classify_dirty
from repostamp_core.fallback import COMMIT, REMOTE, SEMVER, FallbackPolicy
from repostamp_core.models import DescriptorBuilder, RepoDescriptor
from repostamp_core.semver import semver_from_branch
from repostamp_core.stage import Stage, classify_stage
from repostamp_core.vcs.base import QueryExecutor, QueryOutcome, VcsQuery

logger = logging.getLogger(__name__)

ProgressFn = Callable[[str], None]


class RepoQueries:
    """A query executor bound to one repository, one method per named query."""

    def __init__(self, executor: QueryExecutor, repo_root: Path, dirty_string: str) -> None:
        self.executor = executor
        self.repo_root = repo_root
        self.dirty_string = dirty_string

    def _run(self, query: VcsQuery) -> QueryOutcome:
        return self.executor.run(query, self.repo_root, dirty_string=self.dirty_string)

    def current_branch(self) -> QueryOutcome:
        return self._run(VcsQuery.CURRENT_BRANCH)

    def remote_url(self) -> QueryOutcome:
        return self._run(VcsQuery.REMOTE_URL)

    def working_tree_status(self) -> QueryOutcome:
        return self._run(VcsQuery.WORKING_TREE_STATUS)

    def short_commit_hash(self) -> QueryOutcome:
        return self._run(VcsQuery.SHORT_COMMIT_HASH)

    def describe(self) -> QueryOutcome:
        return self._run(VcsQuery.DESCRIBE)

    def commit_count(self) -> QueryOutcome:
        return self._run(VcsQuery.COMMIT_COUNT)


def derive_descriptor(
    repo_root: Union[str, Path],
    executor: QueryExecutor,
    config: RepostampConfig,
    environ: Optional[Mapping[str, str]] = None,
    progress: Optional[ProgressFn] = None,
) -> RepoDescriptor:
    """Derive the descriptor of the working copy at ``repo_root``.

    Query failures never raise; each one is replaced by its configured
    fallback and reported in ``RepoDescriptor.diagnostics``.

    Args:
        repo_root: Working copy root; emitted as an absolute path.
        executor: Query executor (git, null, or a test double).
        config: Effective configuration (fallbacks and CI settings).
        environ: Environment for the CI override; ``os.environ`` when omitted.
        progress: Optional callback receiving short progress messages.
    """
    env = os.environ if environ is None else environ
    notify = progress or (lambda message: None)
    location = Path(repo_root).resolve()

    queries = RepoQueries(executor, location, config.fallbacks.dirty_string)
    policy = FallbackPolicy(config.fallbacks)
    builder = DescriptorBuilder()
    builder.set("location", str(location))

    notify("Resolving branch")
    branch = resolve_branch(queries.current_branch(), policy, env, config.ci.ref_name_variable)
    builder.set("branch", branch.name)

    notify("Classifying stage")
    stage = classify_stage(branch, policy)
    builder.set("stage", stage.value)

    if stage.stage is Stage.RELEASE:
        branch_semver = semver_from_branch(branch.name)
        if branch_semver is not None:
            logger.debug(f"semver {branch_semver} taken from release branch {branch.name!r}")
            builder.set("semver", branch_semver)

    notify("Reconciling describe output")
    reconciliation = reconcile_describe(
        queries.describe(),
        policy,
        commit_count=queries.commit_count,
        short_hash=queries.short_commit_hash,
    )
    builder.set("version", reconciliation.version)
    if not builder.is_set("semver"):
        if reconciliation.semver is not None:
            builder.set("semver", reconciliation.semver)
        else:
            builder.set("semver", policy.substitute(SEMVER, reconciliation.semver_error or "no semver available"))

    notify("Reading remote, status and commit")
    builder.set("remote", policy.resolve(REMOTE, queries.remote_url()))
    builder.set("is_dirty", classify_dirty(queries.working_tree_status(), policy))
    builder.set("commit", policy.resolve(COMMIT, queries.short_commit_hash()))

    descriptor = builder.build(policy.diagnostics)
    logger.debug(f"Derived descriptor for {location} with {len(descriptor.diagnostics)} fallback(s)")
    return descriptor
