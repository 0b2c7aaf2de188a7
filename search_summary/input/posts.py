"""Loading and preparing the posts handed to the model.

The host search exports its matches as JSON, either wrapped with the query:

    {
        "query": "range in cold weather",
        "posts": [
            {
                "id": 1,
                "title": "Winter Range Test",
                "url": "https://example.com/winter-range-test",
                "type": "post",
                "content": "<p>Post body HTML</p>",
                "date": "2025-01-14"
            }
        ]
    }

or as a bare list of post objects.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import re
from typing import Any

from bs4 import BeautifulSoup

from ..config import SearchConfig
from ..core.types import PostContext, SummaryRequest

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def parse_posts_json(data: Any) -> list[PostContext]:
    """Parse host JSON into PostContext objects.

    Args:
        data: The decoded JSON, either {"posts": [...]} or a list

    Returns:
        Posts in input order. Entries missing id, title or url are
        skipped with a warning.

    Raises:
        ValueError: If the JSON holds no post list
    """
    if isinstance(data, dict):
        if "posts" not in data:
            raise ValueError("Invalid JSON format: missing 'posts' key")
        items = data["posts"]
    else:
        items = data
    if not isinstance(items, list):
        raise ValueError("Invalid JSON format: 'posts' must be a list")

    posts: list[PostContext] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning(f"Skipping post #{index}: not an object")
            continue
        if not item.get("title") or not item.get("url"):
            post_id = item.get("id", "unknown")
            logger.warning(f"Skipping post {post_id}: missing required fields (title or url)")
            continue
        try:
            posts.append(PostContext.from_mapping(item))
        except ValueError as exc:
            logger.warning(f"Skipping post #{index}: {exc}")
    return posts


def clean_content(html: str, limit: int) -> str:
    """Strip markup from post content and trim it to ``limit`` characters."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    text = _WHITESPACE_RE.sub(" ", soup.get_text(separator=" ")).strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def prepare_posts(posts: list[PostContext], cfg: SearchConfig) -> list[PostContext]:
    """Apply the max_posts limit and content cleaning, keeping order."""
    prepared: list[PostContext] = []
    for post in posts[: max(1, cfg.max_posts)]:
        prepared.append(
            PostContext(
                id=post.id,
                title=post.title,
                url=post.url,
                type=post.type,
                content=clean_content(post.content, cfg.content_length),
                date=post.date,
            )
        )
    return prepared


def load_request(path: Path, query: str | None = None) -> SummaryRequest:
    """Read a posts file, taking the query from the file unless given.

    Raises:
        ValueError: If no query is available
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    posts = parse_posts_json(data)
    if query is None and isinstance(data, dict):
        query = data.get("query")
    if not query or not str(query).strip():
        raise ValueError("A search query is required")
    return SummaryRequest(query=str(query).strip(), posts=posts)
