"""Async HTTP client for the Micro Feed API."""

from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import structlog

from client.models import FeedPageData, FeedPost

logger = structlog.get_logger()

# Called before every request; the session's access token may rotate
TokenProvider = Callable[[], Awaitable[str | None]]

DEFAULT_PAGE_SIZE = 10


class ApiError(Exception):
    """Non-success response (or transport failure) from the API."""

    def __init__(self, status_code: int, error_code: str, message: str) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        super().__init__(message)


async def _no_token() -> str | None:
    return None


class MicroFeedClient:
    """Thin typed wrapper over the ``/api/v1/posts`` endpoints."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_provider: TokenProvider = _no_token,
        api_prefix: str = "/api/v1",
    ) -> None:
        self._http = http_client
        self._token_provider = token_provider
        self._prefix = api_prefix.rstrip("/")

    async def list_posts(
        self,
        *,
        query: str = "",
        cursor: str | None = None,
        filter: str = "all",
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> FeedPageData:
        params: dict[str, Any] = {"filter": filter, "limit": limit}
        if query.strip():
            params["query"] = query.strip()
        if cursor:
            params["cursor"] = cursor
        data = await self._request("GET", "/posts", params=params)
        return FeedPageData.model_validate(data)

    async def get_post(self, post_id: str) -> FeedPost:
        data = await self._request("GET", f"/posts/{post_id}")
        return FeedPost.model_validate(data)

    async def create_post(self, content: str) -> FeedPost:
        data = await self._request("POST", "/posts", json={"content": content})
        return FeedPost.model_validate(data)

    async def update_post(self, post_id: str, content: str) -> FeedPost:
        data = await self._request("PATCH", f"/posts/{post_id}", json={"content": content})
        return FeedPost.model_validate(data)

    async def delete_post(self, post_id: str) -> str:
        data = await self._request("DELETE", f"/posts/{post_id}")
        return data["message"]

    async def like_post(self, post_id: str) -> str:
        data = await self._request("POST", f"/posts/{post_id}/like")
        return data["message"]

    async def unlike_post(self, post_id: str) -> str:
        data = await self._request("DELETE", f"/posts/{post_id}/like")
        return data["message"]

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {"Content-Type": "application/json"}
        token = await self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(
                method, f"{self._prefix}{path}", headers=headers, **kwargs
            )
        except httpx.TransportError as e:
            logger.warning("api_unreachable", method=method, path=path, error=str(e))
            raise ApiError(0, "NETWORK_ERROR", "Network error, please try again") from e
        except httpx.HTTPError as e:
            logger.warning("api_request_failed", method=method, path=path, error=str(e))
            raise ApiError(0, "REQUEST_FAILED", "Request failed, please try again") from e

        if not response.is_success:
            raise self._error_from(response)

        try:
            return response.json()
        except ValueError as e:
            logger.warning(
                "api_invalid_response",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise ApiError(
                response.status_code, "INVALID_RESPONSE", "Unexpected response from server"
            ) from e

    @staticmethod
    def _error_from(response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return ApiError(
            status_code=response.status_code,
            error_code=str(body.get("error_code") or "HTTP_ERROR"),
            message=str(body.get("message") or f"Request failed ({response.status_code})"),
        )
