from __future__ import annotations

from functools import lru_cache
from typing import Any

import httpx

from gateway.core.config import get_settings

ADVERTS_QUERY = """
query Adverts {
  adverts {
    id
    name
    link
    tracking_source
    tracking_medium
    tracking_campaign
    tracking_campaign_id
  }
}
"""


class EditorialServiceError(Exception):
    """Raised when the editorial service fails or answers with GraphQL errors."""


class EditorialNotConfiguredError(EditorialServiceError):
    """Raised when no editorial service URL or token is configured."""


class EditorialClient:
    def __init__(
        self,
        base_url: str | None,
        token: str | None,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.token = token
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        if not self.base_url or not self.token:
            raise EditorialNotConfiguredError("editorial service is not configured")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.token}",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(
                    self.base_url,
                    json={"query": query, "variables": variables or {}},
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            raise EditorialServiceError(f"editorial service unreachable: {exc}") from exc

        if response.status_code != 200:
            # Avoid echoing large bodies back to callers.
            raise EditorialServiceError(
                f"editorial service returned {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise EditorialServiceError("editorial service returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise EditorialServiceError("editorial service returned a non-object payload")
        errors = payload.get("errors")
        if errors:
            raise EditorialServiceError(f"editorial service returned errors: {errors}")
        data = payload.get("data")
        return data if isinstance(data, dict) else {}

    async def list_adverts(self) -> list[dict[str, Any]]:
        data = await self.execute(ADVERTS_QUERY)
        adverts = data.get("adverts")
        if not isinstance(adverts, list):
            return []
        return [item for item in adverts if isinstance(item, dict)]


@lru_cache
def get_editorial_client() -> EditorialClient:
    settings = get_settings()
    return EditorialClient(
        base_url=settings.editorial_url,
        token=settings.editorial_token,
        timeout_seconds=settings.editorial_timeout_seconds,
    )
