"""Working tree dirtiness."""

from .fallback import STATUS, FallbackPolicy
from .models import DIRTY_FALSE, DIRTY_TRUE
from .vcs.base import QueryOutcome


def classify_dirty(outcome: QueryOutcome, policy: FallbackPolicy) -> str:
    """Map porcelain status output to ``"true"``/``"false"``, or the status fallback on failure."""
    return policy.resolve(STATUS, outcome, lambda status: DIRTY_TRUE if status.strip() else DIRTY_FALSE)
