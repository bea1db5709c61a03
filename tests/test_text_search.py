from __future__ import annotations

from adapters.text_search import relevance, tokenize


def test_tokenize_lowercases_and_drops_punctuation() -> None:
    assert tokenize("Hello, World! it's 9am") == ["hello", "world", "it", "s", "9am"]


def test_relevance_counts_terms_then_hits() -> None:
    assert relevance("hello", "hello hello") == (1, 2)
    assert relevance("hello world", "hello world") == (2, 2)
    assert relevance("hello world", "hello world") > relevance("hello world", "hello hello hello")


def test_only_last_term_is_a_prefix() -> None:
    assert relevance("hel", "hello") == (1, 1)
    assert relevance("hel world", "hello world") == (1, 1)


def test_no_match_and_empty_query() -> None:
    assert relevance("bye", "hello world") == (0, 0)
    assert relevance("", "hello") == (0, 0)
    assert relevance("  ...  ", "hello") == (0, 0)
