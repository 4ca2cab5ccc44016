"""Tests for exact and fuzzy row filtering."""

from __future__ import annotations

from mlcli.search.index import LOCAL_SEARCH_KEYS, filter_exact, fuzzy_search, rank


def _row(job_id: str, description: str = "N/A", **fields: str) -> dict[str, str]:
    row = {key: "N/A" for key in LOCAL_SEARCH_KEYS}
    row.update(job_id=job_id, description=description, **fields)
    return row


class TestFilterExact:
    def test_matches_single_row(self) -> None:
        rows = [_row("a"), _row("b"), _row("ab")]
        assert filter_exact(rows, "b") == [rows[1]]

    def test_no_match(self) -> None:
        assert filter_exact([_row("a")], "A") == []


class TestFuzzySearch:
    def test_typo_recall(self) -> None:
        rows = [_row("anomaly_detection_job"), _row("rare_process_by_host")]

        hits = fuzzy_search(rows, "anomlay", keys=["job_id"], threshold=0.3)

        assert [r["job_id"] for r in hits] == ["anomaly_detection_job"]

    def test_unrelated_query_matches_nothing(self) -> None:
        rows = [_row("anomaly_detection_job", "Detects unusual network traffic")]
        assert fuzzy_search(rows, "zzz_unrelated", keys=["job_id"], threshold=0.3) == []

    def test_empty_query_returns_input(self) -> None:
        rows = [_row("b"), _row("a")]
        assert fuzzy_search(rows, "", keys=["job_id"]) == rows
        assert fuzzy_search(rows, None, keys=["job_id"]) == rows
        assert fuzzy_search(rows, "   ", keys=["job_id"]) == rows

    def test_best_match_first(self) -> None:
        rows = [_row("anomaly_detection_job"), _row("anomlay")]

        hits = fuzzy_search(rows, "anomlay", keys=["job_id"])

        assert [r["job_id"] for r in hits] == ["anomlay", "anomaly_detection_job"]

    def test_ties_keep_input_order(self) -> None:
        rows = [_row("dup", "first"), _row("other"), _row("dup", "second")]

        hits = fuzzy_search(rows, "dup", keys=["job_id"])

        assert [r["description"] for r in hits] == ["first", "second"]

    def test_matches_any_key(self) -> None:
        rows = [_row("job_1", created_by="ml-module-security-auth"), _row("job_2")]
        hits = fuzzy_search(rows, "security", keys=LOCAL_SEARCH_KEYS)
        assert [r["job_id"] for r in hits] == ["job_1"]

    def test_case_insensitive(self) -> None:
        rows = [_row("anomaly_detection_job")]
        assert fuzzy_search(rows, "ANOMALY", keys=["job_id"]) == rows

    def test_placeholder_values_never_match(self) -> None:
        rows = [_row("xyz")]
        assert fuzzy_search(rows, "n/a", keys=LOCAL_SEARCH_KEYS) == []

    def test_lower_threshold_is_stricter(self) -> None:
        rows = [_row("anomaly_detection_job")]
        assert rank(rows, "anomlay", ["job_id"], threshold=0.3)
        assert rank(rows, "anomlay", ["job_id"], threshold=0.05) == []
        assert rank(rows, "anomaly", ["job_id"], threshold=0.0)[0].score == 0.0
