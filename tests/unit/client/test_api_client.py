"""Unit tests for MicroFeedClient."""

import httpx
import pytest

from client.api import ApiError, MicroFeedClient
from tests.unit.client.conftest import FakePostsApi


class TestMicroFeedClient:
    async def test_sends_bearer_token_and_query_params(
        self, api_client: MicroFeedClient, fake_api: FakePostsApi
    ):
        await api_client.list_posts(query="  post 1 ", filter="mine", limit=5)

        request = fake_api.requests[-1]
        assert request.headers["Authorization"] == "Bearer test-token"
        assert request.url.params["query"] == "post 1"
        assert request.url.params["filter"] == "mine"
        assert request.url.params["limit"] == "5"
        assert "cursor" not in request.url.params

    async def test_parses_feed_page(self, api_client: MicroFeedClient):
        page = await api_client.list_posts(limit=10)

        assert len(page.posts) == 10
        assert page.has_more is True
        assert page.next_cursor == page.posts[-1].created_at.isoformat()

    async def test_error_response_raises_api_error(
        self, api_client: MicroFeedClient, fake_api: FakePostsApi
    ):
        fake_api.failures[("POST", "/like")] = (
            400,
            {"error_code": "ALREADY_LIKED", "message": "Post already liked"},
        )

        with pytest.raises(ApiError) as exc_info:
            await api_client.like_post(fake_api.posts[0]["id"])

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "ALREADY_LIKED"
        assert exc_info.value.message == "Post already liked"

    async def test_non_json_error_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway"))
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
            with pytest.raises(ApiError) as exc_info:
                await MicroFeedClient(http).get_post("x")

        assert exc_info.value.status_code == 502
        assert exc_info.value.error_code == "HTTP_ERROR"

    async def test_transport_failure_becomes_network_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(refuse), base_url="http://test"
        ) as http:
            with pytest.raises(ApiError) as exc_info:
                await MicroFeedClient(http).list_posts()

        assert exc_info.value.status_code == 0
        assert exc_info.value.error_code == "NETWORK_ERROR"

    async def test_omits_authorization_without_token(self, fake_api: FakePostsApi):
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(fake_api.handler), base_url="http://test"
        ) as http:
            await MicroFeedClient(http).list_posts()

        assert "Authorization" not in fake_api.requests[-1].headers

    async def test_non_json_success_becomes_invalid_response(
        self, api_client: MicroFeedClient, fake_api: FakePostsApi
    ):
        fake_api.failures[("DELETE", "/like")] = (200, "<html>ok</html>")

        with pytest.raises(ApiError) as exc_info:
            await api_client.unlike_post(fake_api.posts[0]["id"])

        assert exc_info.value.status_code == 200
        assert exc_info.value.error_code == "INVALID_RESPONSE"

    async def test_other_http_errors_become_request_failed(self):
        def loop(request: httpx.Request) -> httpx.Response:
            raise httpx.TooManyRedirects("redirect loop", request=request)

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(loop), base_url="http://test"
        ) as http:
            with pytest.raises(ApiError) as exc_info:
                await MicroFeedClient(http).get_post("x")

        assert exc_info.value.status_code == 0
        assert exc_info.value.error_code == "REQUEST_FAILED"
