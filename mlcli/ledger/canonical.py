"""Canonical serialization of configuration documents.

Two documents are unchanged iff their canonical bytes are identical. Object
keys are sorted recursively; sequence order is significant.
"""

from __future__ import annotations

import json
from typing import Any


def canonical_bytes(doc: Any) -> bytes:
    """Compact, key-sorted UTF-8 JSON for equality checks."""
    return json.dumps(doc, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def canonical_text(doc: Any) -> str:
    """Key-sorted, two-space indented JSON for display and line diffs."""
    return json.dumps(doc, sort_keys=True, indent=2, ensure_ascii=False)


def documents_equal(a: Any, b: Any) -> bool:
    return canonical_bytes(a) == canonical_bytes(b)
