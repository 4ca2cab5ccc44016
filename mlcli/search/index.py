"""Exact and fuzzy filtering over flattened rows.

Fuzzy scores range from 0.0 (exact) to 1.0 (nothing in common); a row is a
match when its best score over the searched keys is at or below the
threshold. Scoring uses rapidfuzz: ``partial_ratio`` when the query fits
inside the field value, plain ``ratio`` otherwise, so short values cannot
match a long unrelated query.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TypeVar

from rapidfuzz import fuzz

from mlcli.search.flatten import PLACEHOLDER

LOCAL_SEARCH_KEYS: tuple[str, ...] = ("job_id", "rule_name", "created_by", "groups", "description")
REMOTE_SEARCH_KEYS: tuple[str, ...] = ("job_id", "description", "groups")

DEFAULT_THRESHOLD = 0.3

R = TypeVar("R", bound=Mapping[str, str])


@dataclass(frozen=True)
class SearchHit:
    index: int
    score: float


def filter_exact(rows: Sequence[R], job_id: str) -> list[R]:
    return [row for row in rows if row.get("job_id") == job_id]


def score(query: str, value: str) -> float:
    """Distance between *query* and *value*; lower is a better match."""
    q = query.casefold()
    v = value.casefold()
    if not q or not v:
        return 1.0
    scorer = fuzz.partial_ratio if len(q) <= len(v) else fuzz.ratio
    return 1.0 - scorer(q, v) / 100.0


def rank(
    rows: Sequence[Mapping[str, str]],
    query: str,
    keys: Sequence[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[SearchHit]:
    """Matching rows best-first; equal scores keep input order."""
    hits = []
    for index, row in enumerate(rows):
        values = [row.get(key) for key in keys]
        scores = [score(query, v) for v in values if v and v != PLACEHOLDER]
        best = min(scores, default=1.0)
        if best <= threshold:
            hits.append(SearchHit(index=index, score=best))
    hits.sort(key=lambda hit: hit.score)
    return hits


def fuzzy_search(
    rows: Sequence[R],
    query: str | None,
    keys: Sequence[str] = LOCAL_SEARCH_KEYS,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[R]:
    """Rows approximately matching *query*; an empty query returns *rows*."""
    if not query or not query.strip():
        return list(rows)
    return [rows[hit.index] for hit in rank(rows, query.strip(), keys, threshold)]
