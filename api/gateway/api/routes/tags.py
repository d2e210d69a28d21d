from fastapi import APIRouter, Depends, Query

from gateway.api.paging import fetch_article_edge, get_page_size
from gateway.core.content_config import ContentConfig, get_content_config
from gateway.schemas.articles import ArticlesEdgeOut
from gateway.services.repository import get_repository

router = APIRouter()


@router.get("/articles", response_model=ArticlesEdgeOut)
async def list_tagged_articles(
    tags: list[int] = Query(default=[], alias="tag"),
    cursor: str | None = Query(default=None),
    page_size: int = Depends(get_page_size),
    config: ContentConfig = Depends(get_content_config),
    repository=Depends(get_repository),
) -> ArticlesEdgeOut:
    edge = await fetch_article_edge(
        repository,
        config,
        taxonomy_ids=tags,
        page_size=page_size,
        cursor=cursor,
    )
    return ArticlesEdgeOut(**edge)
