"""Shared fixtures: a fake vendor API served through httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest


class FakeVendor:
    """Serves queued responses and records every request it receives.

    Queue entries are httpx.Response objects, or httpx transport error
    classes which are raised for the matching request.
    """

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        item = self.responses.pop(0)
        if isinstance(item, type) and issubclass(item, httpx.TransportError):
            raise item("simulated transport failure", request=request)
        return item

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.last_request.content)


@pytest.fixture
def vendor():
    def _make(*responses: Any) -> FakeVendor:
        return FakeVendor(*responses)

    return _make


@pytest.fixture
def winter_posts():
    from search_summary.core.types import PostContext

    return [
        PostContext(
            id=1,
            title="Winter Range Test",
            url="https://x/1",
            type="post",
            content="We drove the truck at -10C and lost about 30 percent of range.",
            date="2025-01-14",
        )
    ]


@pytest.fixture
def winter_payload():
    return {
        "answer_html": "<p>Expect roughly 30% less range in deep cold.</p>",
        "results": [
            {
                "id": 1,
                "title": "Winter Range Test",
                "url": "https://x/1",
                "excerpt": "We drove the truck at -10C...",
                "type": "post",
            }
        ],
    }
