"""Prompt loading and rendering helpers for provider adapters."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Sequence

from ..core.types import PostContext


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"

POST_DELIMITER = "-----"
DEFAULT_SITE = "this website, a news and guide site"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


def build_system_prompt(site_name: str | None = None, max_results: int = 5) -> str:
    return _render_template(
        "system",
        site=site_name or DEFAULT_SITE,
        max_results=str(max_results),
    )


def format_post_block(post: PostContext) -> str:
    lines = [
        f"ID: {post.id}",
        f"Title: {post.title}",
        f"URL: {post.url}",
        f"Type: {post.type}",
    ]
    if post.date:
        lines.append(f"Published: {post.date}")
    lines.append(f"Content: {post.content}")
    lines.append(POST_DELIMITER)
    return "\n".join(lines)


def build_user_message(query: str, posts: Sequence[PostContext]) -> str:
    posts_block = "\n".join(format_post_block(post) for post in posts)
    if not posts_block:
        posts_block = "(no matching posts)"
    return _render_template("user", posts=posts_block, query=query)
