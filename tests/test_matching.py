from __future__ import annotations

import pytest

from cofacts_match.core.config import MatchSettings
from cofacts_match.core.matching import EmptyQueryError, annotate_matches, decide, explain


def test_short_query_matches_on_ratio(make_candidate) -> None:
    d = decide("hello world", make_candidate("hello world!!"), [])
    assert d.method == "text"
    assert d.common_length == len("helloworld")
    assert d.is_match


def test_ratio_uses_query_length_before_whitespace_removal(make_candidate) -> None:
    # 10 common bytes out of 11 raw bytes is 90%.
    d = decide("hello world", make_candidate("helloworld"), [])
    assert d.common_percent == 90
    assert d.is_match

    # 10 common bytes out of 20 raw bytes is 50%.
    d2 = decide("hello          world", make_candidate("helloworld"), [])
    assert d2.common_percent == 50
    assert not d2.is_match


def test_long_common_run_matches_regardless_of_ratio(make_candidate) -> None:
    shared = "x" * 26
    query = shared + "y" * 200
    d = decide(query, make_candidate("zz" + shared + "zz"), [])
    assert d.common_length == 26
    assert d.common_percent < 80
    assert d.is_match

    d2 = decide("x" * 25 + "y" * 200, make_candidate("zz" + "x" * 25 + "zz"), [])
    assert not d2.is_match


def test_url_branch_ignores_text(make_candidate) -> None:
    c = make_candidate("totally unrelated", urls=["http://example.com/x?y=1&z=2"])
    query = "look http://example.com/x?y=1 now"
    d = decide(query, c, ["http://example.com/x?y=1"])
    assert d.method == "url"
    assert d.is_match

    c2 = make_candidate(query, urls=[])
    assert not decide(query, c2, ["http://example.com/x?y=1"]).is_match


def test_empty_query_raises(make_candidate) -> None:
    with pytest.raises(EmptyQueryError):
        decide("", make_candidate("anything"), [])


def test_custom_thresholds(make_candidate) -> None:
    strict = MatchSettings(min_common_bytes=100, min_common_percent=101)
    assert not decide("hello world", make_candidate("hello world"), [], settings=strict).is_match


def test_explain_returns_common_text(make_candidate) -> None:
    decision, common = explain("你好 世界", make_candidate("大家說你好世界喔"))
    assert decision.is_match
    assert common == "你好世界"


def test_annotate_matches_extracts_urls_once_and_flags_each(make_candidate) -> None:
    query = "is this true? https://news.example.com/story/1/?utm_source=line"
    hits = [
        make_candidate("x", urls=["https://news.example.com/story/1?utm_source=line&ref=abc"], id="a"),
        make_candidate(query, urls=["https://other.example.com/"], id="b"),
        make_candidate("y", urls=["not a url", "http://[::1"], id="c"),
    ]
    out = annotate_matches(query, hits)
    assert [c.is_match for c in out] == [True, False, False]
    assert out[0] is hits[0]


def test_annotate_matches_text_branch(make_candidate) -> None:
    query = "吃香蕉可以治療癌症，趕快分享給親友"
    hits = [
        make_candidate("網傳：吃香蕉可以治療癌症，趕快分享給親友！", id="a"),
        make_candidate("今天天氣很好", id="b"),
    ]
    annotate_matches(query, hits)
    assert hits[0].is_match
    assert not hits[1].is_match


def test_annotate_matches_empty_query_marks_all_non_matching(make_candidate) -> None:
    hits = [make_candidate("a"), make_candidate("b")]
    hits[0].is_match = True
    annotate_matches("", hits)
    assert not any(c.is_match for c in hits)
