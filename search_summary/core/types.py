"""
Core data types for AI search summaries.

This module defines the structures exchanged between the host site and the
provider adapters:
- PostContext: One matched post handed to the model as context
- SummaryRequest: A search query with its ordered post context
- SummaryResult: The normalized answer (or user-facing error)
- KeyTestResult: Outcome of an API key probe
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


POST_TYPES = ("post", "page")


@dataclass(frozen=True)
class PostContext:
    """A single post supplied by the host search.

    Attributes:
        id: The post identifier on the host site
        title: The post headline
        url: Permalink to the post
        type: Either "post" or "page"
        content: Plain-text content (already trimmed by the caller)
        date: Optional publication date, newest posts are preferred by the model
    """

    id: int
    title: str
    url: str
    type: str = "post"
    content: str = ""
    date: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PostContext":
        """Build a PostContext from a host-supplied dict.

        Raises:
            ValueError: If the id is missing or not an integer
        """
        raw_id = data.get("id")
        if raw_id is None or isinstance(raw_id, bool):
            raise ValueError(f"Invalid post id: {raw_id!r}")
        try:
            post_id = int(raw_id)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid post id: {raw_id!r}") from exc

        post_type = str(data.get("type") or "post").strip().lower()
        if post_type not in POST_TYPES:
            post_type = "post"

        date = data.get("date")
        return cls(
            id=post_id,
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            type=post_type,
            content=str(data.get("content") or ""),
            date=str(date) if date else None,
        )


@dataclass
class SummaryRequest:
    """A search query with the posts the model may answer from."""

    query: str
    posts: list[PostContext] = field(default_factory=list)


@dataclass
class SummaryResult:
    """Normalized outcome of a summary request.

    Exactly one shape is populated: either answer_html/results on success,
    or error on failure.

    Attributes:
        answer_html: HTML fragment answering the query
        results: Up to five source entries (id, title, url, excerpt, type)
        error: User-facing error message, None on success
        error_type: Machine-readable error category, None on success
    """

    answer_html: str = ""
    results: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str, error_type: str | None = None) -> "SummaryResult":
        return cls(error=message, error_type=error_type)

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        return {"answer_html": self.answer_html, "results": list(self.results)}


@dataclass
class KeyTestResult:
    """Outcome of an API key probe.

    Attributes:
        success: Whether the key authenticated
        message: User-facing description
        details: Optional diagnostics (e.g. model_count)
        error_type: Error category on failure
    """

    success: bool
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    error_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success, "message": self.message}
        payload.update(self.details)
        if self.error_type is not None:
            payload["error_type"] = self.error_type
        return payload
