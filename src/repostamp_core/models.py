"""Descriptor models.

``RepoDescriptor`` is immutable. It is only produced by
``DescriptorBuilder.build()``, which refuses to build until every field has
been filled explicitly; a builder starts with every field ``UNSET``.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Tuple

from .errors import DescriptorIncompleteError

DIRTY_TRUE = "true"
DIRTY_FALSE = "false"


class _Unset:
    """Marker for a descriptor field that no resolver has filled yet."""

    _instance = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class FieldDiagnostic:
    """A fallback substitution: which field, and the original failure text."""

    field: str
    error: str
    fallback: str


@dataclass(frozen=True)
class RepoDescriptor:
    """Normalized identity of a working copy."""

    location: str
    branch: str
    commit: str
    is_dirty: str  # "true" | "false" | status fallback
    remote: str
    semver: str
    stage: str
    version: str
    diagnostics: Tuple[FieldDiagnostic, ...] = field(default=(), compare=False)

    @classmethod
    def field_names(cls) -> List[str]:
        """Output fields in their fixed emission order."""
        return [f.name for f in fields(cls) if f.name != "diagnostics"]


class DescriptorBuilder:
    """Per-run accumulator for descriptor fields."""

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {name: UNSET for name in RepoDescriptor.field_names()}

    def set(self, name: str, value: str) -> None:
        if name not in self._values:
            raise KeyError(f"Unknown descriptor field: {name}")
        self._values[name] = value

    def get(self, name: str) -> Any:
        return self._values[name]

    def is_set(self, name: str) -> bool:
        return self._values[name] is not UNSET

    def build(self, diagnostics: Tuple[FieldDiagnostic, ...] = ()) -> RepoDescriptor:
        missing = [name for name, value in self._values.items() if value is UNSET]
        if missing:
            raise DescriptorIncompleteError(missing)
        return RepoDescriptor(**self._values, diagnostics=tuple(diagnostics))
