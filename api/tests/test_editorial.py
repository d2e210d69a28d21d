from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from gateway.services.content import get_advert
from gateway.services.editorial import EditorialClient, EditorialNotConfiguredError, EditorialServiceError


def _client(handler) -> EditorialClient:
    return EditorialClient(
        base_url="https://editorial.example.org/graphql",
        token="secret-token",
        transport=httpx.MockTransport(handler),
    )


def test_list_adverts_posts_graphql_query_with_bearer_token() -> None:
    captured: dict[str, Any] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["authorization"] = request.headers.get("authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"adverts": [{"id": "1", "name": "Bookshop"}]}}, request=request)

    adverts = asyncio.run(_client(handler).list_adverts())

    assert adverts == [{"id": "1", "name": "Bookshop"}]
    assert captured["url"] == "https://editorial.example.org/graphql"
    assert captured["authorization"] == "Bearer secret-token"
    assert "adverts" in captured["body"]["query"]


def test_get_advert_merges_tracking_into_link_and_hides_tracking_fields() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "data": {
                    "adverts": [
                        {
                            "id": "7",
                            "name": "Bookshop",
                            "link": "https://books.example.com/sale",
                            "tracking_source": "paper",
                            "tracking_medium": "web",
                            "tracking_campaign": "spring",
                            "tracking_campaign_id": None,
                        },
                        {"id": "8", "name": "Second"},
                    ]
                }
            },
            request=request,
        )

    advert = asyncio.run(get_advert(_client(handler)))

    assert advert == {
        "id": "7",
        "name": "Bookshop",
        "link": "https://books.example.com/sale?utm_source=paper&utm_medium=web&utm_campaign=spring",
    }


def test_get_advert_without_adverts_is_none() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"adverts": []}}, request=request)

    assert asyncio.run(get_advert(_client(handler))) is None


def test_non_200_response_is_a_service_error() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom", request=request)

    with pytest.raises(EditorialServiceError):
        asyncio.run(_client(handler).list_adverts())


def test_graphql_errors_are_a_service_error() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errors": [{"message": "bad"}]}, request=request)

    with pytest.raises(EditorialServiceError):
        asyncio.run(_client(handler).list_adverts())


def test_unconfigured_client_raises_not_configured() -> None:
    client = EditorialClient(base_url=None, token=None)

    with pytest.raises(EditorialNotConfiguredError):
        asyncio.run(client.list_adverts())
