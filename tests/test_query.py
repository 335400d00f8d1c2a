"""Tests for wren.http.query — read-only QueryParams."""

import pytest

from wren.http.query import QueryParams


class TestQueryParams:
    def test_getitem(self) -> None:
        q = QueryParams(b"q=hello&page=2")
        assert q["q"] == "hello"
        assert q["page"] == "2"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            QueryParams(b"q=hello")["missing"]

    def test_contains_and_len(self) -> None:
        q = QueryParams(b"a=1&b=2&c=3")
        assert "a" in q
        assert "z" not in q
        assert len(q) == 3

    def test_get(self) -> None:
        q = QueryParams(b"a=1")
        assert q.get("a") == "1"
        assert q.get("b") is None
        assert q.get("b", "x") == "x"

    def test_get_list(self) -> None:
        q = QueryParams(b"tag=a&tag=b")
        assert q.get_list("tag") == ["a", "b"]
        assert q.get_list("none") == []

    def test_blank_values_kept(self) -> None:
        assert QueryParams(b"flag=")["flag"] == ""

    def test_percent_decoding(self) -> None:
        assert QueryParams(b"q=hello%20world")["q"] == "hello world"

    def test_to_dict_unwraps_single_values(self) -> None:
        q = QueryParams(b"q=wren&tag=a&tag=b")
        assert q.to_dict() == {"q": "wren", "tag": ["a", "b"]}

    def test_raw_kept_verbatim(self) -> None:
        q = QueryParams(b"q=hello%20world&a=1")
        assert q.raw == "q=hello%20world&a=1"

    def test_empty(self) -> None:
        q = QueryParams()
        assert len(q) == 0
        assert q.raw == ""
        assert q.to_dict() == {}
