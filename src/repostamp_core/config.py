"""Configuration and environment resolution for repostamp.

The effective config is built by layering sources (later wins):
1) System defaults (hardcoded, ``SYSTEM_DEFAULTS``)
2) One TOML file, located by ``ConfigLoader.resolve_config_path``

Config file lookup order:
1) explicit path (``--config-file``)
2) ``REPOSTAMP_CONFIG`` environment variable
3) per execution environment (``REPOSTAMP_ENV``):
   development -> ./config/repostamp.toml
   production  -> $XDG_CONFIG_HOME/repostamp/config.toml (~/.config by default)

An explicitly named file must exist. A missing default-location file means
system defaults only.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError, EnvironmentResolutionError

# Conditional TOML import: stdlib tomllib (3.11+) or the tomli backport (<3.11)
try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)

ENV_VAR = "REPOSTAMP_ENV"
CONFIG_ENV_VAR = "REPOSTAMP_CONFIG"

SYSTEM_DEFAULTS: dict[str, Any] = {
    "fallbacks": {
        "dirty_string": "-DIRTY",
        "branch": "UNKNOWN",
        "commit": "UNKNOWN",
        "commit_count": "0",
        "remote": "UNKNOWN",
        "semver": "0.0.0",
        "stage": "UNKNOWN",
        "status": "UNKNOWN",
        "tag": "NOTAG",
        "version": "UNKNOWN",
    },
    "ci": {
        "ref_name_variable": "CI_COMMIT_REF_NAME",
    },
}


class Environment(str, Enum):
    """Execution environment; only affects where config is looked up."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class FallbackDefaults(BaseModel):
    """Configured substitutes, one per derivable field, plus the describe dirty suffix."""

    dirty_string: str = Field(..., min_length=1, description="Suffix appended to dirty describe output")
    branch: str = Field(..., min_length=1)
    commit: str = Field(..., min_length=1)
    commit_count: str = Field(..., min_length=1)
    remote: str = Field(..., min_length=1)
    semver: str = Field(..., min_length=1)
    stage: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    tag: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid", frozen=True)


class CiSettings(BaseModel):
    """CI integration settings."""

    ref_name_variable: str = Field(
        ..., min_length=1, description="Variable holding the branch name on detached CI checkouts"
    )

    model_config = ConfigDict(extra="forbid", frozen=True)


class RepostampConfig(BaseModel):
    """Effective configuration."""

    fallbacks: FallbackDefaults
    ci: CiSettings
    source: Optional[Path] = Field(None, description="Config file that was merged, if any")

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)


class ConfigLoader:
    """Locate, load and validate repostamp configuration."""

    @staticmethod
    def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = dict(base)
        for key, value in overlay.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    @staticmethod
    def _read_toml(path: Path) -> dict[str, Any]:
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to read config from {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Config TOML must be a table: {path}")
        return data

    @staticmethod
    def resolve_environment(environ: Optional[Mapping[str, str]] = None) -> Environment:
        """Resolve the execution environment from ``REPOSTAMP_ENV``."""
        env = os.environ if environ is None else environ
        raw = env.get(ENV_VAR, "").strip().lower()
        if not raw:
            return Environment.PRODUCTION
        try:
            return Environment(raw)
        except ValueError:
            raise EnvironmentResolutionError(ENV_VAR, raw, [e.value for e in Environment])

    @staticmethod
    def default_config_path(
        environment: Environment,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> Path:
        env = os.environ if environ is None else environ
        if environment is Environment.DEVELOPMENT:
            return (cwd or Path.cwd()) / "config" / "repostamp.toml"
        xdg = env.get("XDG_CONFIG_HOME", "").strip()
        base = Path(xdg) if xdg else Path.home() / ".config"
        return base / "repostamp" / "config.toml"

    @staticmethod
    def resolve_config_path(
        explicit: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> tuple[Optional[Path], bool]:
        """Return ``(path, required)``; ``path`` is None when nothing applies.

        Explicitly named files (option or ``REPOSTAMP_CONFIG``) are required.
        ``REPOSTAMP_ENV`` is validated even when a file is named explicitly.
        """
        env = os.environ if environ is None else environ
        environment = ConfigLoader.resolve_environment(env)
        if explicit is not None:
            return explicit, True
        from_env = env.get(CONFIG_ENV_VAR, "").strip()
        if from_env:
            return Path(from_env), True
        return ConfigLoader.default_config_path(environment, env, cwd), False

    @staticmethod
    def from_mapping(data: Mapping[str, Any], source: Optional[Path] = None) -> RepostampConfig:
        """Validate ``data`` layered over the system defaults."""
        merged = ConfigLoader._deep_merge(SYSTEM_DEFAULTS, dict(data))
        merged["source"] = source
        try:
            return RepostampConfig(**merged)
        except ValidationError as e:
            where = f" in {source}" if source else ""
            raise ConfigError(f"Invalid configuration{where}: {e}")

    @staticmethod
    def load(
        explicit: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> RepostampConfig:
        """Resolve the environment, locate the config file and build the effective config."""
        path, required = ConfigLoader.resolve_config_path(explicit, environ, cwd)
        if path is None or not path.exists():
            if required:
                raise ConfigError(f"Config file not found: {path}")
            logger.debug(f"No config file at {path}; using system defaults")
            return ConfigLoader.from_mapping({})
        if not path.is_file():
            raise ConfigError(f"Config path is not a file: {path}")

        logger.debug(f"Loading config from {path}")
        return ConfigLoader.from_mapping(ConfigLoader._read_toml(path), source=path.resolve())
