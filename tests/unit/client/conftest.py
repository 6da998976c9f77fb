"""Fixtures for client state tests: an in-memory fake of the posts API."""

import asyncio
import json
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from uuid import uuid4

import httpx
import pytest

from client.api import MicroFeedClient
from client.state import FeedStore

ME = str(uuid4())


class FakePostsApi:
    """Serves ``/api/v1/posts*`` from a list, newest first."""

    def __init__(self, post_count: int = 0) -> None:
        start = datetime(2026, 3, 1, 12, 0, 0)
        self.posts = [self._post(f"post {i}", start - timedelta(minutes=i)) for i in range(post_count)]
        self.requests: list[httpx.Request] = []
        # (method, path suffix) -> (status, body) to force errors
        self.failures: dict[tuple[str, str], tuple[int, dict | str]] = {}

    @staticmethod
    def _post(content: str, created_at: datetime, author: str = ME) -> dict:
        stamp = created_at.isoformat()
        return {
            "id": str(uuid4()),
            "author_id": author,
            "content": content,
            "created_at": stamp,
            "updated_at": stamp,
            "is_edited": False,
            "author": {"id": author, "username": "me"},
            "likes_count": 0,
            "is_liked": False,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")

        for (method, suffix), (status, body) in self.failures.items():
            if request.method == method and path.endswith(suffix):
                if isinstance(body, str):
                    return httpx.Response(status, text=body)
                return httpx.Response(status, json=body)

        if path == "/posts" and request.method == "GET":
            return self._list(request)
        if path == "/posts" and request.method == "POST":
            content = json.loads(request.content)["content"]
            post = self._post(content, datetime.utcnow())
            self.posts.insert(0, post)
            return httpx.Response(201, json=post)

        parts = path.strip("/").split("/")
        post = next((p for p in self.posts if p["id"] == parts[1]), None)
        if post is None:
            return httpx.Response(404, json={"error_code": "POST_NOT_FOUND", "message": "Post not found"})

        if len(parts) == 3 and request.method == "POST":
            post["likes_count"] += 1
            post["is_liked"] = True
            return httpx.Response(200, json={"message": "Post liked successfully"})
        if len(parts) == 3 and request.method == "DELETE":
            if post["is_liked"]:
                post["likes_count"] -= 1
            post["is_liked"] = False
            return httpx.Response(200, json={"message": "Post unliked successfully"})
        if request.method == "PATCH":
            post["content"] = json.loads(request.content)["content"]
            post["is_edited"] = True
            return httpx.Response(200, json=post)
        if request.method == "DELETE":
            self.posts.remove(post)
            return httpx.Response(200, json={"message": "Post deleted successfully"})
        return httpx.Response(200, json=post)

    def _list(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        limit = int(params.get("limit", "10"))
        rows = self.posts
        if params.get("query"):
            rows = [p for p in rows if params["query"].lower() in p["content"].lower()]
        if params.get("cursor"):
            rows = [p for p in rows if p["created_at"] < params["cursor"]]
        page = rows[: limit + 1]
        has_more = len(page) > limit
        page = page[:limit]
        return httpx.Response(
            200,
            json={
                "posts": page,
                "has_more": has_more,
                "next_cursor": page[-1]["created_at"] if has_more else None,
            },
        )


@pytest.fixture
def fake_api() -> FakePostsApi:
    return FakePostsApi(post_count=15)


@pytest.fixture
async def api_client(fake_api: FakePostsApi) -> AsyncGenerator[MicroFeedClient, None]:
    async def token() -> str:
        return "test-token"

    async def handle(request: httpx.Request) -> httpx.Response:
        # Yield like a real network round trip so concurrent calls interleave
        await asyncio.sleep(0)
        return fake_api.handler(request)

    transport = httpx.MockTransport(handle)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield MicroFeedClient(http, token_provider=token)


@pytest.fixture
def store(api_client: MicroFeedClient) -> FeedStore:
    return FeedStore(api_client)
