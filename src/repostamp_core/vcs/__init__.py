"""VCS query layer."""

from .base import QueryExecutor, QueryOutcome, VcsQuery
from .detector import detect_executor
from .git_adapter import GitExecutor
from .null_adapter import NullExecutor

__all__ = [
    "QueryExecutor",
    "QueryOutcome",
    "VcsQuery",
    "GitExecutor",
    "NullExecutor",
    "detect_executor",
]
