from collections.abc import Iterable
from typing import Any

from fastapi import Depends, HTTPException, Query, status

from gateway.core.config import Settings, get_settings
from gateway.core.content_config import ContentConfig
from gateway.services.content import list_tagged_articles
from gateway.services.pagination import InvalidCursor
from gateway.services.repository import RepositoryUnavailableError


def get_page_size(
    take: int | None = Query(default=None, ge=1),
    settings: Settings = Depends(get_settings),
) -> int:
    page_size = take if take is not None else settings.default_page_size
    if page_size > settings.max_page_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"take must be at most {settings.max_page_size}",
        )
    return page_size


async def fetch_article_edge(
    repository: Any,
    config: ContentConfig,
    *,
    taxonomy_ids: Iterable[int],
    page_size: int,
    cursor: str | None,
) -> dict[str, Any]:
    try:
        return await list_tagged_articles(
            repository,
            config,
            taxonomy_ids=taxonomy_ids,
            page_size=page_size,
            cursor=cursor,
        )
    except InvalidCursor as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
