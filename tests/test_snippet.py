from pubsearch.search.matchers import MatchRange
from pubsearch.search.snippet import build_snippet


def test_snippet_extends_to_whole_words() -> None:
    text = "one two three four five"
    snippet = build_snippet(text, MatchRange(8, 13), 2)
    assert snippet.highlight == "three"
    assert snippet.before == "two "
    assert snippet.after == " four"


def test_snippet_never_cuts_words_even_without_budget() -> None:
    text = "we concatenate strings"
    snippet = build_snippet(text, MatchRange(6, 9), 0)
    assert snippet.highlight == "cat"
    assert snippet.before == "con"
    assert snippet.after == "enate"


def test_snippet_is_bounded_by_text() -> None:
    snippet = build_snippet("cat", MatchRange(0, 3), 200)
    assert (snippet.before, snippet.highlight, snippet.after) == ("", "cat", "")


def test_snippet_takes_whole_text_when_shorter_than_budget() -> None:
    text = "the cat sat"
    snippet = build_snippet(text, MatchRange(4, 7), 200)
    assert snippet.before == "the "
    assert snippet.after == " sat"


def test_snippet_edges_fall_on_whitespace() -> None:
    text = "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor"
    start = text.index("adipiscing")
    snippet = build_snippet(text, MatchRange(start, start + len("adipiscing")), 10)

    before_start = start - len(snippet.before)
    assert before_start == 0 or text[before_start - 1].isspace()
    after_end = start + len("adipiscing") + len(snippet.after)
    assert after_end == len(text) or text[after_end].isspace()
    assert len(snippet.before) >= 10 and len(snippet.after) >= 10
