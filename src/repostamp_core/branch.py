"""Branch resolution with the CI detached-HEAD override."""

import logging
from dataclasses import dataclass
from typing import Mapping

from .fallback import BRANCH, FallbackPolicy
from .vcs.base import QueryOutcome

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"


@dataclass(frozen=True)
class BranchResolution:
    """Resolved branch name; ``resolved`` is False when it is the fallback."""

    name: str
    resolved: bool
    from_ci: bool = False


def resolve_branch(
    outcome: QueryOutcome,
    policy: FallbackPolicy,
    environ: Mapping[str, str],
    ci_variable: str,
) -> BranchResolution:
    """Resolve the branch from the current-branch query.

    Only the literal detached sentinel ``HEAD`` is replaced by the CI
    reference name, and only when that variable is set and non-empty.
    """
    if not outcome.ok:
        return BranchResolution(policy.substitute(BRANCH, outcome.error or "query failed"), resolved=False)

    name = outcome.value.strip()
    if not name:
        return BranchResolution(policy.substitute(BRANCH, "empty branch name"), resolved=False)

    if name == DETACHED_HEAD:
        ci_ref = environ.get(ci_variable, "").strip()
        if ci_ref:
            logger.info(f"Detached HEAD; using {ci_variable}={ci_ref!r} as branch")
            return BranchResolution(ci_ref, resolved=True, from_ci=True)
        logger.debug(f"Detached HEAD and {ci_variable} is not set; keeping {DETACHED_HEAD!r}")

    return BranchResolution(name, resolved=True)
