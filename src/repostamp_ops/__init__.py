"""
repostamp_ops - Use-case functions for working copy descriptors.

CLI commands delegate to these functions; this is an import-only package.

Modules:
    descriptor: per-run derivation of a RepoDescriptor
    emit: marker-wrapped JSON emission and extraction
"""

from .descriptor import RepoQueries, derive_descriptor
from .emit import BEGIN_MARKER, END_MARKER, descriptor_payload, extract_descriptor, render_descriptor

__all__ = [
    "RepoQueries",
    "derive_descriptor",
    "BEGIN_MARKER",
    "END_MARKER",
    "descriptor_payload",
    "extract_descriptor",
    "render_descriptor",
]
