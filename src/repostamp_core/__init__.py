"""repostamp core - working copy identity derivation library."""

from .__version__ import __version__, __version_info__

from .config import ConfigLoader, Environment, FallbackDefaults, RepostampConfig
from .models import UNSET, DescriptorBuilder, FieldDiagnostic, RepoDescriptor
from .fallback import FallbackPolicy
from .branch import BranchResolution, resolve_branch
from .stage import STAGE_RULES, Stage, StageRule, classify_stage
from .semver import has_release_tag, is_semver, semver_from_branch, semver_from_describe
from .describe import DescribeOutput, Reconciliation, parse_describe, reconcile_describe
from .dirty import classify_dirty
from .vcs import GitExecutor, NullExecutor, QueryExecutor, QueryOutcome, VcsQuery, detect_executor
from .errors import (
    ConfigError,
    DescriptorIncompleteError,
    EnvironmentResolutionError,
    RepositoryPathError,
    RepostampError,
)

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Config
    "ConfigLoader",
    "Environment",
    "FallbackDefaults",
    "RepostampConfig",
    # Models
    "UNSET",
    "DescriptorBuilder",
    "FieldDiagnostic",
    "RepoDescriptor",
    # Resolvers
    "FallbackPolicy",
    "BranchResolution",
    "resolve_branch",
    "STAGE_RULES",
    "Stage",
    "StageRule",
    "classify_stage",
    "has_release_tag",
    "is_semver",
    "semver_from_branch",
    "semver_from_describe",
    "DescribeOutput",
    "Reconciliation",
    "parse_describe",
    "reconcile_describe",
    "classify_dirty",
    # VCS
    "GitExecutor",
    "NullExecutor",
    "QueryExecutor",
    "QueryOutcome",
    "VcsQuery",
    "detect_executor",
    # Errors
    "ConfigError",
    "DescriptorIncompleteError",
    "EnvironmentResolutionError",
    "RepositoryPathError",
    "RepostampError",
]
