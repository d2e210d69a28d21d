from fastapi import APIRouter, Depends, HTTPException, status

from gateway.core.config import Settings, get_settings
from gateway.core.content_config import ContentConfig, get_content_config
from gateway.core.ids import ARTICLE, InvalidIdentifier
from gateway.schemas.articles import ArticleDetailOut
from gateway.services.content import load_article_detail
from gateway.services.repository import RepositoryNotFoundError, RepositoryUnavailableError, get_repository

router = APIRouter()


@router.get("/id/{article_id}", response_model=ArticleDetailOut)
async def get_article_by_id(
    article_id: str,
    settings: Settings = Depends(get_settings),
    config: ContentConfig = Depends(get_content_config),
    repository=Depends(get_repository),
) -> ArticleDetailOut:
    try:
        raw_id = config.ids.decode(ARTICLE, article_id)
    except InvalidIdentifier as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="article not found") from exc

    try:
        row = await repository.get_article_by_id(raw_id)
        payload = await load_article_detail(repository, config, row, media_base_url=settings.media_base_url)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ArticleDetailOut(**payload)


@router.get("/{slug}", response_model=ArticleDetailOut)
async def get_article(
    slug: str,
    settings: Settings = Depends(get_settings),
    config: ContentConfig = Depends(get_content_config),
    repository=Depends(get_repository),
) -> ArticleDetailOut:
    try:
        row = await repository.get_article_by_slug(slug)
        payload = await load_article_detail(repository, config, row, media_base_url=settings.media_base_url)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ArticleDetailOut(**payload)
