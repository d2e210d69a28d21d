from __future__ import annotations

import asyncio
import os
from collections.abc import Coroutine
from typing import Any, TypeVar

import asyncpg  # type: ignore[import-untyped]
import pytest

from gateway.services.pagination import request_page
from gateway.services.repository import PostgresRepository, RepositoryNotFoundError

T = TypeVar("T")

SCHEMA_SQL = """
create table if not exists wp_posts (
  id bigint primary key,
  post_author bigint not null default 0,
  post_date_gmt timestamp not null,
  post_modified_gmt timestamp not null,
  post_content text not null default '',
  post_title text not null default '',
  post_excerpt text not null default '',
  post_status varchar(20) not null default 'publish',
  post_name varchar(200) not null default '',
  post_type varchar(20) not null default 'post',
  post_mime_type varchar(100) not null default '',
  guid varchar(255) not null default ''
);
create table if not exists wp_postmeta (
  meta_id bigserial primary key,
  post_id bigint not null,
  meta_key varchar(255),
  meta_value text
);
create table if not exists wp_users (
  id bigint primary key,
  user_nicename varchar(50) not null,
  display_name varchar(250) not null
);
create table if not exists wp_usermeta (
  umeta_id bigserial primary key,
  user_id bigint not null,
  meta_key varchar(255),
  meta_value text
);
create table if not exists wp_term_relationships (
  object_id bigint not null,
  term_taxonomy_id bigint not null,
  primary key (object_id, term_taxonomy_id)
);
"""


def _run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


@pytest.fixture(scope="session")
def database_url() -> str:
    url = os.getenv("GW_DATABASE_URL") or os.getenv("DATABASE_URL")
    if not url:
        pytest.skip("integration tests require GW_DATABASE_URL or DATABASE_URL")
    return url


@pytest.fixture(autouse=True)
def seeded(database_url: str) -> None:
    _run(_seed(database_url))


async def _seed(database_url: str) -> None:
    conn = await asyncpg.connect(database_url)
    try:
        await conn.execute(SCHEMA_SQL)
        await conn.execute(
            "truncate wp_posts, wp_postmeta, wp_users, wp_usermeta, wp_term_relationships restart identity"
        )
        await conn.executemany(
            """
            insert into wp_posts (id, post_author, post_date_gmt, post_modified_gmt, post_title, post_name, post_status, post_type, guid, post_mime_type)
            values ($1, $2, timestamp '2024-01-01' + make_interval(hours => $1::int), timestamp '2024-01-01', $3, $4, $5, $6, $7, $8)
            """,
            [
                *[(object_id, 200, f"Story {object_id}", f"story-{object_id}", "publish", "post", "", "") for object_id in range(1, 51)],
                (60, 200, "Draft", "draft", "draft", "post", "", ""),
                (900, 200, "Cover", "cover", "inherit", "attachment", "http://wp.internal/uploads/cover.jpg", "image/jpeg"),
            ],
        )
        await conn.executemany(
            "insert into wp_term_relationships (object_id, term_taxonomy_id) values ($1, $2)",
            [*[(object_id, 5) for object_id in range(1, 51)], (31, 9), (60, 5)],
        )
        await conn.execute("insert into wp_users (id, user_nicename, display_name) values (200, 'sam', 'Sam')")
        await conn.execute(
            "insert into wp_usermeta (user_id, meta_key, meta_value) values (200, 'description', ' Reporter ')"
        )
        await conn.execute(
            "insert into wp_postmeta (post_id, meta_key, meta_value) values "
            "(50, '_thumbnail_id', '900'), (900, '_wp_attachment_image_alt', 'Cover alt')"
        )
    finally:
        await conn.close()


def _repository(database_url: str) -> PostgresRepository:
    return PostgresRepository(database_url=database_url, min_pool_size=1, max_pool_size=2)


def test_pages_through_memberships_without_duplicates(database_url: str) -> None:
    async def walk() -> list[list[int]]:
        repository = _repository(database_url)
        pages: list[list[int]] = []
        cursor: str | None = None
        try:
            while True:
                page = await request_page(repository, {5, 9}, 20, cursor)
                pages.append(page.ids)
                if not page.has_next_page:
                    return pages
                cursor = page.next_cursor
        finally:
            await repository.close()

    pages = _run(walk())

    assert pages == [list(range(50, 30, -1)), list(range(30, 10, -1)), list(range(10, 0, -1))]


def test_article_author_and_image_lookups(database_url: str) -> None:
    async def lookups() -> tuple[dict[str, Any], dict[str, Any], dict[str, Any] | None]:
        repository = _repository(database_url)
        try:
            article = await repository.get_article_by_slug("story-50")
            author = await repository.get_author_by_slug("sam")
            image = await repository.get_featured_image(50)
            with pytest.raises(RepositoryNotFoundError):
                await repository.get_article_by_slug("draft")
            return article, author, image
        finally:
            await repository.close()

    article, author, image = _run(lookups())

    assert article["id"] == 50
    assert article["author_id"] == 200
    assert author == {"id": 200, "slug": "sam", "name": "Sam", "bio": " Reporter "}
    assert image == {
        "url": "http://wp.internal/uploads/cover.jpg",
        "mime_type": "image/jpeg",
        "caption": "",
        "alt": "Cover alt",
    }
