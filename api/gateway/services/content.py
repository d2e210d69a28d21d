"""Shapes raw WordPress rows into public payloads.

Everything leaving the service passes through here: integer keys are wrapped
by the id codec and article authorship is reported under the canonical author
of its merge group.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from gateway.core.content_config import ContentConfig
from gateway.core.ids import ARTICLE, AUTHOR
from gateway.core.urls import TRACKING_PARAMS, append_tracking_params, rewrite_media_url
from gateway.services.editorial import EditorialClient
from gateway.services.pagination import ArticlePage, request_page
from gateway.services.repository import RepositoryNotFoundError


def text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = value.strip() if isinstance(value, str) else str(value)
    return text or None


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def conform_article(row: dict[str, Any], config: ContentConfig) -> dict[str, Any]:
    author_id = config.identity.canonicalize(int(row["author_id"]))
    return {
        "id": config.ids.encode(ARTICLE, int(row["id"])),
        "author_id": config.ids.encode(AUTHOR, author_id),
        "slug": row["slug"],
        "title": row["title"],
        "content": row["content"] or "",
        "published": as_utc(row["published_at"]),
        "updated": as_utc(row["updated_at"]),
    }


def conform_author(row: dict[str, Any], config: ContentConfig) -> dict[str, Any]:
    return {
        "id": config.ids.encode(AUTHOR, int(row["id"])),
        "slug": row["slug"],
        "name": row["name"],
        "bio": text_or_none(row.get("bio")),
    }


def conform_image(row: dict[str, Any], media_base_url: str) -> dict[str, Any]:
    return {
        "url": rewrite_media_url(row["url"], media_base_url),
        "mime_type": text_or_none(row.get("mime_type")),
        "caption": text_or_none(row.get("caption")),
        "alt": text_or_none(row.get("alt")),
    }


def order_by_ids(rows: Iterable[dict[str, Any]], ids: Sequence[int]) -> list[dict[str, Any]]:
    """Arrange rows in `ids` order, skipping ids that no longer resolve to a row."""
    by_id = {int(row["id"]): row for row in rows}
    return [by_id[article_id] for article_id in ids if article_id in by_id]


async def load_article_edge(repository: Any, config: ContentConfig, page: ArticlePage) -> dict[str, Any]:
    rows = await repository.list_articles_by_ids(page.ids)
    return {
        "has_next_page": page.has_next_page,
        "last_cursor": page.next_cursor,
        "nodes": [conform_article(row, config) for row in order_by_ids(rows, page.ids)],
    }


async def list_tagged_articles(
    repository: Any,
    config: ContentConfig,
    *,
    taxonomy_ids: Iterable[int],
    page_size: int,
    cursor: str | None,
) -> dict[str, Any]:
    page = await request_page(repository, taxonomy_ids, page_size, cursor)
    return await load_article_edge(repository, config, page)


async def list_author_articles(repository: Any, config: ContentConfig, author_id: int) -> list[dict[str, Any]]:
    related = config.identity.related_ids(author_id)
    rows = await repository.list_articles_by_authors(related.all_ids())
    return [conform_article(row, config) for row in rows]


async def resolve_canonical_author(
    repository: Any,
    config: ContentConfig,
    author_id: int,
) -> dict[str, Any] | None:
    canonical_id = config.identity.related_ids(author_id).canonical_id
    if canonical_id == author_id:
        return None
    try:
        row = await repository.get_author_by_id(canonical_id)
    except RepositoryNotFoundError as exc:
        raise RepositoryNotFoundError(f"canonical author {canonical_id} not found") from exc
    return conform_author(row, config)


async def load_author_detail(repository: Any, config: ContentConfig, row: dict[str, Any]) -> dict[str, Any]:
    payload = conform_author(row, config)
    payload["canonical"] = await resolve_canonical_author(repository, config, int(row["id"]))
    return payload


async def load_article_detail(
    repository: Any,
    config: ContentConfig,
    row: dict[str, Any],
    *,
    media_base_url: str,
) -> dict[str, Any]:
    payload = conform_article(row, config)
    author_id = config.identity.canonicalize(int(row["author_id"]))
    try:
        author = await repository.get_author_by_id(author_id)
    except RepositoryNotFoundError as exc:
        raise RepositoryNotFoundError(f"author {author_id} of article {row['id']} not found") from exc
    payload["author"] = conform_author(author, config)

    image = await repository.get_featured_image(int(row["id"]))
    payload["featured_image"] = conform_image(image, media_base_url) if image is not None else None
    return payload


def conform_advert(advert: dict[str, Any]) -> dict[str, Any]:
    tracking_fields = {field_name for _, field_name in TRACKING_PARAMS}
    payload = {key: value for key, value in advert.items() if key not in tracking_fields}
    link = text_or_none(advert.get("link"))
    if link is not None:
        link = append_tracking_params(link, {name: text_or_none(advert.get(name)) for name in tracking_fields})
    payload["link"] = link
    return payload


async def get_advert(editorial: EditorialClient) -> dict[str, Any] | None:
    adverts = await editorial.list_adverts()
    if not adverts:
        return None
    return conform_advert(adverts[0])
