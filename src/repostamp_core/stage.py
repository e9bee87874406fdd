"""Release stage classification from branch naming conventions.

Rules are evaluated top to bottom; the first match wins. A branch that no
rule matches gets the stage fallback, and a fallback branch is never
classified at all.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from .branch import BranchResolution
from .fallback import STAGE, FallbackPolicy

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    FEATURE = "feature"
    DEVELOP = "develop"
    MASTER = "master"
    RELEASE = "release"


@dataclass(frozen=True)
class StageRule:
    """One classification rule: a branch predicate and the stage it yields."""

    description: str
    predicate: Callable[[str], bool]
    stage_of: Callable[[str], Stage]

    def apply(self, branch: str) -> Optional[Stage]:
        return self.stage_of(branch) if self.predicate(branch) else None


STAGE_RULES: tuple[StageRule, ...] = (
    StageRule(
        "feature/ prefix",
        lambda branch: branch.startswith("feature/"),
        lambda branch: Stage.FEATURE,
    ),
    StageRule(
        "develop or master",
        lambda branch: branch in (Stage.DEVELOP.value, Stage.MASTER.value),
        lambda branch: Stage(branch),
    ),
    StageRule(
        "release/ prefix",
        lambda branch: branch.startswith("release/"),
        lambda branch: Stage.RELEASE,
    ),
)


@dataclass(frozen=True)
class StageResult:
    """Classified stage; ``stage`` is None when ``value`` is the fallback."""

    stage: Optional[Stage]
    value: str


def match_stage(branch: str, rules: Sequence[StageRule] = STAGE_RULES) -> Optional[Stage]:
    for rule in rules:
        stage = rule.apply(branch)
        if stage is not None:
            logger.debug(f"Branch {branch!r} matched rule '{rule.description}' -> {stage.value}")
            return stage
    return None


def classify_stage(
    branch: BranchResolution,
    policy: FallbackPolicy,
    rules: Sequence[StageRule] = STAGE_RULES,
) -> StageResult:
    if not branch.resolved:
        return StageResult(None, policy.fallback_for(STAGE))

    stage = match_stage(branch.name, rules)
    if stage is None:
        return StageResult(None, policy.substitute(STAGE, f"unexpected branch name {branch.name!r}"))
    return StageResult(stage, stage.value)
