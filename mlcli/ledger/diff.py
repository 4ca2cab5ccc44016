"""Recursive JSON diff between two configuration documents.

``diff_documents`` walks both documents with object keys in sorted order, so
the same pair of documents always yields the same change list regardless of
key insertion order. Sequences are compared position by position.

``full_diff`` is a line diff over the canonical pretty-printed forms.
"""

from __future__ import annotations

import difflib
import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from mlcli.ledger.canonical import canonical_bytes, canonical_text

NO_DIFFERENCES = "No differences found."


class ChangeType(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


class LineKind(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


@dataclass(frozen=True)
class FieldChange:
    """A single added, removed or changed value at a dotted path."""

    path: str
    change_type: ChangeType
    old_value: Any = None
    new_value: Any = None

    def summary(self) -> str:
        if self.change_type == ChangeType.ADDED:
            return f"+ {self.path}: {_render(self.new_value)}"
        if self.change_type == ChangeType.REMOVED:
            return f"- {self.path}: {_render(self.old_value)}"
        return f"~ {self.path}: {_render(self.old_value)} -> {_render(self.new_value)}"


@dataclass(frozen=True)
class DiffLine:
    kind: LineKind
    text: str

    def render(self) -> str:
        prefix = {LineKind.ADDED: "+ ", LineKind.REMOVED: "- ", LineKind.CONTEXT: "  "}[self.kind]
        return prefix + self.text


def diff_documents(old: Any, new: Any, path: str = "") -> list[FieldChange]:
    """Structural changes turning *old* into *new*."""
    if isinstance(old, dict) and isinstance(new, dict):
        changes: list[FieldChange] = []
        for key in sorted(old.keys() | new.keys()):
            child = f"{path}.{key}" if path else str(key)
            if key not in new:
                changes.append(FieldChange(child, ChangeType.REMOVED, old_value=old[key]))
            elif key not in old:
                changes.append(FieldChange(child, ChangeType.ADDED, new_value=new[key]))
            else:
                changes.extend(diff_documents(old[key], new[key], child))
        return changes

    if isinstance(old, list) and isinstance(new, list):
        changes = []
        for index in range(max(len(old), len(new))):
            child = f"{path}[{index}]"
            if index >= len(new):
                changes.append(FieldChange(child, ChangeType.REMOVED, old_value=old[index]))
            elif index >= len(old):
                changes.append(FieldChange(child, ChangeType.ADDED, new_value=new[index]))
            else:
                changes.extend(diff_documents(old[index], new[index], child))
        return changes

    # Leaves, and containers whose type changed. Canonical bytes keep 1 != True.
    if canonical_bytes(old) != canonical_bytes(new):
        return [FieldChange(path or "$", ChangeType.CHANGED, old_value=old, new_value=new)]
    return []


def summarized_diff(old: Any, new: Any) -> str:
    """One line per structural change, or NO_DIFFERENCES."""
    if canonical_bytes(old) == canonical_bytes(new):
        return NO_DIFFERENCES
    return "\n".join(change.summary() for change in diff_documents(old, new))


def full_diff(old: Any, new: Any) -> list[DiffLine]:
    """Line-level diff over the key-sorted, two-space indented forms."""
    old_lines = canonical_text(old).splitlines()
    new_lines = canonical_text(new).splitlines()
    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
    lines: list[DiffLine] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            lines.extend(DiffLine(LineKind.CONTEXT, text) for text in old_lines[i1:i2])
            continue
        lines.extend(DiffLine(LineKind.REMOVED, text) for text in old_lines[i1:i2])
        lines.extend(DiffLine(LineKind.ADDED, text) for text in new_lines[j1:j2])
    return lines


def render_full_diff(lines: list[DiffLine]) -> str:
    return "\n".join(line.render() for line in lines)


def _render(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False)
