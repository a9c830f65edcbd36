from __future__ import annotations

import pytest

from cofacts_match.core.utils import chunk_bytes, extract_urls, remove_whitespace


def test_remove_whitespace_drops_four_ascii_whitespace_chars() -> None:
    assert remove_whitespace("a b\tc\r\nd") == "abcd"


def test_remove_whitespace_keeps_other_unicode_whitespace() -> None:
    assert remove_whitespace("a\u3000b\u00a0c") == "a\u3000b\u00a0c"
    assert remove_whitespace("") == ""


def test_chunk_bytes_last_window_may_be_short() -> None:
    assert list(chunk_bytes(b"abcdefg", 3)) == [b"abc", b"def", b"g"]
    assert list(chunk_bytes(b"", 3)) == []
    with pytest.raises(ValueError):
        list(chunk_bytes(b"abc", 0))


def test_extract_urls_requires_scheme_and_trims_punctuation() -> None:
    text = "See https://example.com/a?b=1, and (http://x.org/y). Not example.com or www.foo.com."
    assert extract_urls(text) == ["https://example.com/a?b=1", "http://x.org/y"]


def test_extract_urls_keeps_balanced_parens_and_stops_at_cjk_punctuation() -> None:
    text = "參考 https://en.wikipedia.org/wiki/Foo_(bar)，還有https://cofacts.tw/article/abc。"
    assert extract_urls(text) == [
        "https://en.wikipedia.org/wiki/Foo_(bar)",
        "https://cofacts.tw/article/abc",
    ]


def test_extract_urls_empty_text() -> None:
    assert extract_urls("") == []
    assert extract_urls("no links here") == []
