"""Uniform fallback substitution for query-driven fields.

Every derivation step goes through ``FallbackPolicy.resolve``: a successful
query is passed to the step's derivation, a failed one is logged, recorded
as a ``FieldDiagnostic`` and replaced by the configured default for that
field. One policy instance belongs to exactly one run.
"""

import logging
from typing import Callable, List, Optional, Tuple

from .config import FallbackDefaults
from .models import FieldDiagnostic
from .vcs.base import QueryOutcome

logger = logging.getLogger(__name__)

# Fallback keys; each names a field of FallbackDefaults.
BRANCH = "branch"
COMMIT = "commit"
COMMIT_COUNT = "commit_count"
REMOTE = "remote"
SEMVER = "semver"
STAGE = "stage"
STATUS = "status"
TAG = "tag"
VERSION = "version"

FALLBACK_KEYS = (BRANCH, COMMIT, COMMIT_COUNT, REMOTE, SEMVER, STAGE, STATUS, TAG, VERSION)


class FallbackPolicy:
    """Substitutes configured defaults and keeps the failure trail of one run."""

    def __init__(self, defaults: FallbackDefaults) -> None:
        self.defaults = defaults
        self._diagnostics: List[FieldDiagnostic] = []

    @property
    def dirty_string(self) -> str:
        return self.defaults.dirty_string

    @property
    def diagnostics(self) -> Tuple[FieldDiagnostic, ...]:
        return tuple(self._diagnostics)

    def fallback_for(self, key: str) -> str:
        if key not in FALLBACK_KEYS:
            raise KeyError(f"No fallback configured for {key!r}")
        return getattr(self.defaults, key)

    def substitute(self, key: str, error: str) -> str:
        """Record ``error`` for ``key`` and return the key's fallback."""
        fallback = self.fallback_for(key)
        logger.warning(f"{key}: {error}; using fallback {fallback!r}")
        self._diagnostics.append(FieldDiagnostic(field=key, error=error, fallback=fallback))
        return fallback

    def resolve(
        self,
        key: str,
        outcome: QueryOutcome,
        derive: Optional[Callable[[str], str]] = None,
    ) -> str:
        """Return the derived value of a successful outcome, else the fallback."""
        if not outcome.ok:
            return self.substitute(key, outcome.error or "query failed")
        return derive(outcome.value) if derive else outcome.value
