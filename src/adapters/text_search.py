"""Relevance scoring for search indexes.

Matching is case-insensitive on word tokens. Every query term must match a
whole token, except the last one, which also matches as a prefix so results
update while the user is still typing.
"""

from __future__ import annotations

import re
from typing import List, Tuple

_TOKEN_RE = re.compile(r"\w+")


def tokenize(text: str) -> List[str]:
    return [token.lower() for token in _TOKEN_RE.findall(text)]


def relevance(query: str, text: str) -> Tuple[int, int]:
    """Score ``text`` against ``query`` as (distinct terms matched, total hits).

    (0, 0) means no match. Tuples compare naturally, so higher is better.
    """

    terms = tokenize(query)
    if not terms:
        return (0, 0)
    last = terms[-1]
    tokens = tokenize(text)

    matched = 0
    hits = 0
    for term in dict.fromkeys(terms):
        if term == last:
            count = sum(1 for token in tokens if token.startswith(term))
        else:
            count = sum(1 for token in tokens if token == term)
        if count:
            matched += 1
            hits += count
    return (matched, hits)
