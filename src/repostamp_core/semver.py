"""Strict MAJOR.MINOR.PATCH extraction from release branches and describe output."""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

STRICT_SEMVER = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
# Describe output from a release tag starts with MAJOR.MINOR.PATCH.
RELEASE_TAG_PREFIX = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+")


def is_semver(value: str) -> bool:
    return STRICT_SEMVER.fullmatch(value) is not None


def semver_from_branch(branch: str) -> Optional[str]:
    """Return the text after the last ``/`` of a release branch if it is a strict semver.

    ``release/2.3.0`` -> ``2.3.0``. Anything else (``release/next``) yields
    None so the describe output decides instead.
    """
    candidate = branch.rsplit("/", 1)[-1]
    if is_semver(candidate):
        return candidate
    logger.warning(f"Release branch {branch!r} does not end in MAJOR.MINOR.PATCH; ignoring it for semver")
    return None


def has_release_tag(text: str) -> bool:
    return RELEASE_TAG_PREFIX.match(text) is not None


def semver_from_describe(text: str) -> Optional[str]:
    """Return the tag of describe output if it is a strict semver.

    The tag is everything before the first ``-``: ``0.1.5-42-g652c397`` ->
    ``0.1.5``, while ``1.2.3.4-5-gabc1234`` has no semver.
    """
    tag = text.split("-", 1)[0]
    return tag if is_semver(tag) else None
