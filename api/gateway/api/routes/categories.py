from fastapi import APIRouter, Depends, HTTPException, Query, status

from gateway.api.paging import fetch_article_edge, get_page_size
from gateway.core.categories import Category
from gateway.core.content_config import ContentConfig, get_content_config
from gateway.schemas.articles import ArticlesEdgeOut
from gateway.schemas.categories import CategoryOut
from gateway.services.repository import get_repository

router = APIRouter()


def _category_out(category: Category) -> CategoryOut:
    return CategoryOut(
        slug=category.slug,
        name=category.name,
        is_section=category.is_section,
        wordpress_tags=list(category.wordpress_tags),
    )


def _get_category(slug: str, config: ContentConfig) -> Category:
    category = config.categories.get(slug)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="category not found")
    return category


@router.get("", response_model=list[CategoryOut])
async def list_categories(
    sections_only: bool = Query(default=False),
    config: ContentConfig = Depends(get_content_config),
) -> list[CategoryOut]:
    categories = config.categories.categories()
    if sections_only:
        categories = [category for category in categories if category.is_section]
    return [_category_out(category) for category in categories]


@router.get("/{slug}", response_model=CategoryOut)
async def get_category(slug: str, config: ContentConfig = Depends(get_content_config)) -> CategoryOut:
    return _category_out(_get_category(slug, config))


@router.get("/{slug}/articles", response_model=ArticlesEdgeOut)
async def list_category_articles(
    slug: str,
    cursor: str | None = Query(default=None),
    page_size: int = Depends(get_page_size),
    config: ContentConfig = Depends(get_content_config),
    repository=Depends(get_repository),
) -> ArticlesEdgeOut:
    category = _get_category(slug, config)
    edge = await fetch_article_edge(
        repository,
        config,
        taxonomy_ids=category.wordpress_tags,
        page_size=page_size,
        cursor=cursor,
    )
    return ArticlesEdgeOut(**edge)
