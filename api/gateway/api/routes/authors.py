from fastapi import APIRouter, Depends, HTTPException, status

from gateway.core.content_config import ContentConfig, get_content_config
from gateway.core.ids import AUTHOR, InvalidIdentifier
from gateway.schemas.articles import ArticleOut
from gateway.schemas.authors import AuthorDetailOut
from gateway.services.content import list_author_articles, load_author_detail
from gateway.services.repository import RepositoryNotFoundError, RepositoryUnavailableError, get_repository

router = APIRouter()


@router.get("/id/{author_id}", response_model=AuthorDetailOut)
async def get_author_by_id(
    author_id: str,
    config: ContentConfig = Depends(get_content_config),
    repository=Depends(get_repository),
) -> AuthorDetailOut:
    try:
        raw_id = config.ids.decode(AUTHOR, author_id)
    except InvalidIdentifier as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="author not found") from exc

    try:
        row = await repository.get_author_by_id(raw_id)
        payload = await load_author_detail(repository, config, row)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return AuthorDetailOut(**payload)


@router.get("/{slug}", response_model=AuthorDetailOut)
async def get_author(
    slug: str,
    config: ContentConfig = Depends(get_content_config),
    repository=Depends(get_repository),
) -> AuthorDetailOut:
    try:
        row = await repository.get_author_by_slug(slug)
        payload = await load_author_detail(repository, config, row)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return AuthorDetailOut(**payload)


@router.get("/{slug}/articles", response_model=list[ArticleOut])
async def get_author_articles(
    slug: str,
    config: ContentConfig = Depends(get_content_config),
    repository=Depends(get_repository),
) -> list[ArticleOut]:
    try:
        row = await repository.get_author_by_slug(slug)
        rows = await list_author_articles(repository, config, int(row["id"]))
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return [ArticleOut(**item) for item in rows]
