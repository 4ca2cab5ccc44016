"""Tests for canonicalization and the diff engine."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from mlcli.ledger.canonical import canonical_bytes, documents_equal
from mlcli.ledger.diff import (
    NO_DIFFERENCES,
    ChangeType,
    FieldChange,
    LineKind,
    diff_documents,
    full_diff,
    render_full_diff,
    summarized_diff,
)

# JSON-like documents: nested dicts/lists of scalars.
_scalars = st.none() | st.booleans() | st.integers(-1000, 1000) | st.text(max_size=20)
_documents = st.recursive(
    _scalars,
    lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=20,
)
_objects = st.dictionaries(st.text(max_size=8), _documents, max_size=5)


def _reverse_keys(value):
    if isinstance(value, dict):
        return {k: _reverse_keys(value[k]) for k in reversed(list(value))}
    if isinstance(value, list):
        return [_reverse_keys(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Canonicalization
# ---------------------------------------------------------------------------


class TestCanonical:
    @given(doc=_objects)
    @settings(max_examples=100)
    def test_key_order_never_changes_canonical_form(self, doc) -> None:
        assert canonical_bytes(doc) == canonical_bytes(_reverse_keys(doc))

    def test_list_order_is_significant(self) -> None:
        assert not documents_equal({"groups": ["a", "b"]}, {"groups": ["b", "a"]})

    def test_bool_and_int_differ(self) -> None:
        assert not documents_equal({"enabled": True}, {"enabled": 1})


# ---------------------------------------------------------------------------
# Summarized diff
# ---------------------------------------------------------------------------


class TestSummarizedDiff:
    @given(doc=_objects)
    @settings(max_examples=100)
    def test_identity_reports_no_differences(self, doc) -> None:
        assert summarized_diff(doc, doc) == NO_DIFFERENCES
        assert summarized_diff(doc, _reverse_keys(doc)) == NO_DIFFERENCES

    def test_added_removed_and_changed(self) -> None:
        old = {"a": 1, "b": {"c": 2}, "l": [1, 2]}
        new = {"a": 1, "b": {"c": 3, "d": 4}, "l": [1]}

        assert diff_documents(old, new) == [
            FieldChange("b.c", ChangeType.CHANGED, old_value=2, new_value=3),
            FieldChange("b.d", ChangeType.ADDED, new_value=4),
            FieldChange("l[1]", ChangeType.REMOVED, old_value=2),
        ]
        assert summarized_diff(old, new) == "~ b.c: 2 -> 3\n+ b.d: 4\n- l[1]: 2"

    def test_type_change_reports_whole_values(self) -> None:
        assert summarized_diff({"a": {"x": 1}}, {"a": 5}) == '~ a: {"x": 1} -> 5'

    def test_nested_list_of_objects(self) -> None:
        old = {"job": {"analysis_config": {"detectors": [{"function": "rare"}]}}}
        new = {"job": {"analysis_config": {"detectors": [{"function": "high_count"}, {"function": "rare"}]}}}

        changes = diff_documents(old, new)

        assert [c.path for c in changes] == [
            "job.analysis_config.detectors[0].function",
            "job.analysis_config.detectors[1]",
        ]
        assert changes[1].change_type == ChangeType.ADDED

    def test_output_is_independent_of_key_order(self) -> None:
        old = {"z": 1, "a": {"y": 1, "b": 2}}
        new = {"a": {"b": 3, "y": 0}, "z": 2}
        assert summarized_diff(old, new) == summarized_diff(_reverse_keys(old), _reverse_keys(new))
        assert summarized_diff(old, new).splitlines()[0].startswith("~ a.b")


# ---------------------------------------------------------------------------
# Full diff
# ---------------------------------------------------------------------------


class TestFullDiff:
    @given(doc=_objects)
    @settings(max_examples=50)
    def test_identity_has_only_context_lines(self, doc) -> None:
        lines = full_diff(doc, _reverse_keys(doc))
        assert lines
        assert all(line.kind == LineKind.CONTEXT for line in lines)

    def test_changed_value_yields_removed_then_added(self) -> None:
        lines = full_diff({"a": 1}, {"a": 2})

        assert [(line.kind, line.text) for line in lines] == [
            (LineKind.CONTEXT, "{"),
            (LineKind.REMOVED, '  "a": 1'),
            (LineKind.ADDED, '  "a": 2'),
            (LineKind.CONTEXT, "}"),
        ]

    def test_render_prefixes(self) -> None:
        rendered = render_full_diff(full_diff({"a": 1}, {"a": 2}))
        assert rendered.splitlines() == ["  {", '-   "a": 1', '+   "a": 2', "  }"]
