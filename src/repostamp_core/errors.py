"""Exception taxonomy for repostamp-core.

Only configuration, environment and path problems are raised. Version
control query failures are values (see ``vcs.base.QueryOutcome``) and are
resolved to configured fallbacks instead.
"""

from pathlib import Path
from typing import List


class RepostampError(Exception):
    """Base exception for all repostamp errors."""

    pass


# Config errors


class ConfigError(RepostampError):
    """Failed to locate, parse or validate configuration."""

    pass


class EnvironmentResolutionError(ConfigError):
    """The execution environment selector holds an unsupported value."""

    def __init__(self, variable: str, value: str, allowed: List[str]) -> None:
        self.variable = variable
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Unsupported {variable}={value!r} (expected one of: {', '.join(allowed)})"
        )


# Target errors


class RepositoryPathError(RepostampError):
    """Target path is missing or is not a directory."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid repository path {path}: {reason}")


# Assembly errors


class DescriptorIncompleteError(RepostampError):
    """A descriptor was built before every field was resolved."""

    def __init__(self, missing: List[str]) -> None:
        self.missing = missing
        super().__init__(f"Descriptor fields never resolved: {', '.join(missing)}")
