"""Tests for loading and preparing host post exports."""

from __future__ import annotations

import json

import pytest

from search_summary.config import SearchConfig
from search_summary.core.types import PostContext
from search_summary.input.posts import clean_content, load_request, parse_posts_json, prepare_posts


def test_parse_wrapped_posts():
    posts = parse_posts_json(
        {
            "posts": [
                {"id": 1, "title": "A", "url": "https://x/1", "type": "Page"},
                {"id": 2, "title": "B", "url": "https://x/2", "type": "attachment"},
            ]
        }
    )
    assert [post.id for post in posts] == [1, 2]
    assert posts[0].type == "page"
    assert posts[1].type == "post"


def test_parse_bare_list_skips_incomplete_entries():
    posts = parse_posts_json(
        [
            {"id": 1, "title": "A", "url": "https://x/1"},
            {"id": 2, "title": "", "url": "https://x/2"},
            {"id": 3, "title": "C"},
            "not a post",
            {"id": "abc", "title": "D", "url": "https://x/4"},
        ]
    )
    assert [post.id for post in posts] == [1]


def test_parse_rejects_missing_posts_key():
    with pytest.raises(ValueError, match="missing 'posts' key"):
        parse_posts_json({"items": []})


def test_parse_rejects_non_list_posts():
    with pytest.raises(ValueError):
        parse_posts_json({"posts": {"id": 1}})


def test_clean_content_strips_markup_and_scripts():
    html = "<p>Range <b>drops</b>\n\n in the cold.</p><script>track()</script><style>p{}</style>"
    assert clean_content(html, 400) == "Range drops in the cold."


def test_clean_content_truncates():
    assert clean_content("<p>abcdefghij</p>", 4) == "abcd..."
    assert clean_content("", 10) == ""


def test_prepare_posts_limits_and_cleans():
    posts = [
        PostContext(id=n, title=f"T{n}", url=f"https://x/{n}", content=f"<p>Body {n}</p>")
        for n in range(5)
    ]
    prepared = prepare_posts(posts, SearchConfig(max_posts=2, content_length=50))
    assert [post.id for post in prepared] == [0, 1]
    assert prepared[0].content == "Body 0"


def test_load_request_reads_query_from_file(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text(
        json.dumps({"query": " winter range ", "posts": [{"id": 1, "title": "A", "url": "https://x/1"}]}),
        encoding="utf-8",
    )
    request = load_request(path)
    assert request.query == "winter range"
    assert len(request.posts) == 1


def test_load_request_explicit_query_wins(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text(json.dumps({"query": "file query", "posts": []}), encoding="utf-8")
    assert load_request(path, "cli query").query == "cli query"


def test_load_request_requires_query(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text(json.dumps([{"id": 1, "title": "A", "url": "https://x/1"}]), encoding="utf-8")
    with pytest.raises(ValueError, match="search query is required"):
        load_request(path)
