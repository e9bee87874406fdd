"""Describe output parsing and version reconciliation.

``git describe --tags --always --dirty=<suffix>`` produces one of four shapes:

    d844df9                    no tag, clean
    d844df9-DIRTY              no tag, dirty
    0.1.5-42-g652c397          tagged, clean
    0.1.5-42-g652c397-DIRTY    tagged, dirty

Output starting with MAJOR.MINOR.PATCH is tagged and used as the version
unchanged. Its semver is the tag only when the tag is exactly
MAJOR.MINOR.PATCH (``1.2.3.4-5-gabc1234`` keeps its version but has no
semver). Untagged output is rebuilt as
``<tag fallback>-<commit count>-g<short hash>[<dirty suffix>]`` so that every
version has the same tag-count-hash structure.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from .fallback import COMMIT_COUNT, TAG, VERSION, FallbackPolicy
from .semver import has_release_tag, semver_from_describe
from .vcs.base import QueryOutcome

logger = logging.getLogger(__name__)

_DISTANCE_HASH = re.compile(r"-([0-9]+)-g([0-9a-fA-F]+)$")


@dataclass(frozen=True)
class DescribeOutput:
    """Classified describe text."""

    text: str
    tagged: bool
    semver: Optional[str]
    dirty: bool
    commit_hash: Optional[str]


@dataclass(frozen=True)
class Reconciliation:
    """Version derived from describe output, plus its semver when one exists."""

    version: str
    semver: Optional[str]
    semver_error: Optional[str] = None


def parse_describe(text: str, dirty_string: str) -> DescribeOutput:
    """Classify describe output by tag presence and dirty suffix."""
    text = text.strip()
    dirty = bool(dirty_string) and text.endswith(dirty_string) and len(text) > len(dirty_string)
    body = text[: -len(dirty_string)] if dirty else text

    tagged = has_release_tag(body)
    semver = semver_from_describe(body) if tagged else None
    match = _DISTANCE_HASH.search(body)
    if match:
        commit_hash = match.group(2)
    elif not tagged:
        # Untagged describe output is the abbreviated hash itself.
        commit_hash = body or None
    else:
        commit_hash = None
    return DescribeOutput(text=text, tagged=tagged, semver=semver, dirty=dirty, commit_hash=commit_hash)


def rebuild_untagged_version(tag: str, count: str, commit_hash: str, dirty_suffix: str = "") -> str:
    return f"{tag}-{count}-g{commit_hash}{dirty_suffix}"


def reconcile_describe(
    outcome: QueryOutcome,
    policy: FallbackPolicy,
    commit_count: Callable[[], QueryOutcome],
    short_hash: Callable[[], QueryOutcome],
) -> Reconciliation:
    """Derive the version (and semver, when tagged) from a describe query.

    ``commit_count`` and ``short_hash`` are only called for untagged output.
    """
    if not outcome.ok:
        version = policy.substitute(VERSION, outcome.error or "query failed")
        return Reconciliation(version, None, "describe query failed")

    parsed = parse_describe(outcome.value, policy.dirty_string)
    if not parsed.text:
        version = policy.substitute(VERSION, "empty describe output")
        return Reconciliation(version, None, "empty describe output")

    if parsed.tagged:
        if parsed.semver is None:
            return Reconciliation(parsed.text, None, f"tag of {parsed.text!r} is not MAJOR.MINOR.PATCH")
        return Reconciliation(parsed.text, parsed.semver)

    logger.debug(f"No release tag reachable (describe: {parsed.text!r}); rebuilding version")
    count = policy.resolve(COMMIT_COUNT, commit_count())

    hash_outcome = short_hash()
    if hash_outcome.ok and hash_outcome.value.strip():
        commit_hash = hash_outcome.value.strip()
    else:
        logger.info(f"short-commit-hash unavailable ({hash_outcome.error}); using hash from describe output")
        commit_hash = parsed.commit_hash or parsed.text

    version = rebuild_untagged_version(
        policy.fallback_for(TAG),
        count,
        commit_hash,
        policy.dirty_string if parsed.dirty else "",
    )
    return Reconciliation(version, None, "no semver tag reachable from HEAD")
