"""
emit.py - Serialize a RepoDescriptor for downstream extraction.

The JSON object is wrapped in fixed marker lines so that build tooling can
cut it out of mixed console output. Field order is fixed.
"""

from __future__ import annotations

import json
from typing import Dict

from repostamp_core.models import RepoDescriptor

BEGIN_MARKER = "--- BEGIN REPO DESCRIPTOR ---"
END_MARKER = "--- END REPO DESCRIPTOR ---"


def descriptor_payload(descriptor: RepoDescriptor) -> Dict[str, str]:
    """Return the output fields in emission order."""
    return {name: getattr(descriptor, name) for name in RepoDescriptor.field_names()}


def render_descriptor(descriptor: RepoDescriptor, markers: bool = True) -> str:
    body = json.dumps(descriptor_payload(descriptor), ensure_ascii=True, indent=2)
    if not markers:
        return body
    return "\n".join([BEGIN_MARKER, body, END_MARKER])


def extract_descriptor(text: str) -> Dict[str, str]:
    """Parse the JSON object found between the marker lines of ``text``."""
    lines = text.splitlines()
    try:
        start = lines.index(BEGIN_MARKER)
        end = lines.index(END_MARKER, start + 1)
    except ValueError:
        raise ValueError("descriptor markers not found")
    return json.loads("\n".join(lines[start + 1 : end]))
