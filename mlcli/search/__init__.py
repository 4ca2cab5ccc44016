"""Flattened views of job configurations and ranked search over them."""

from mlcli.search.flatten import FLAT_FIELDS, PLACEHOLDER, flatten, simplify_query
from mlcli.search.index import LOCAL_SEARCH_KEYS, REMOTE_SEARCH_KEYS, filter_exact, fuzzy_search

__all__ = [
    "FLAT_FIELDS",
    "LOCAL_SEARCH_KEYS",
    "PLACEHOLDER",
    "REMOTE_SEARCH_KEYS",
    "filter_exact",
    "flatten",
    "fuzzy_search",
    "simplify_query",
]
