from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from typing import Any

import asyncpg  # type: ignore[import-untyped]

from gateway.core.config import get_settings
from gateway.services.pagination import MembershipKey


class RepositoryError(Exception):
    """Base repository error."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the database is unavailable or not configured."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when the requested entity does not exist."""


VISIBLE_POST_SQL = (
    "p.post_status = 'publish' "
    "and p.post_type = 'post' "
    "and p.post_date_gmt <= (now() at time zone 'utc')"
)
ARTICLE_COLUMNS_SQL = """
              p.id,
              p.post_name,
              p.post_date_gmt,
              p.post_modified_gmt,
              p.post_title,
              p.post_content,
              p.post_author
"""


class PostgresRepository:
    """Read-only access to the WordPress content tables."""

    def __init__(
        self,
        database_url: str | None,
        min_pool_size: int,
        max_pool_size: int,
        command_timeout_seconds: float = 15.0,
    ) -> None:
        self.database_url = database_url
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.command_timeout_seconds = command_timeout_seconds
        self._pool: asyncpg.Pool | None = None

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def fetch_memberships(
        self,
        *,
        taxonomy_ids: Sequence[int],
        after: MembershipKey | None,
        limit: int,
    ) -> list[MembershipKey]:
        pool = await self._get_pool()
        params: list[Any] = []

        def bind(value: Any) -> str:
            params.append(value)
            return f"${len(params)}"

        conditions = [
            f"m.term_taxonomy_id = any({bind(list(taxonomy_ids))}::bigint[])",
            VISIBLE_POST_SQL,
        ]
        if after is not None:
            object_token = bind(after.object_id)
            taxonomy_token = bind(after.term_taxonomy_id)
            # Mixed-direction composite comparison, expanded by hand; a row
            # comparison like (a, b) > (x, y) only supports one direction.
            conditions.append(
                f"(m.object_id < {object_token} "
                f"or (m.object_id = {object_token} and m.term_taxonomy_id > {taxonomy_token}))"
            )
            conditions.append(f"m.object_id <> {object_token}")
        limit_token = bind(limit)

        rows = await pool.fetch(
            f"""
            select distinct on (m.object_id)
              m.object_id,
              m.term_taxonomy_id
            from wp_term_relationships m
            join wp_posts p on p.id = m.object_id
            where {" and ".join(conditions)}
            order by m.object_id desc, m.term_taxonomy_id asc
            limit {limit_token}
            """,
            *params,
        )
        return [
            MembershipKey(object_id=int(row["object_id"]), term_taxonomy_id=int(row["term_taxonomy_id"]))
            for row in rows
        ]

    async def list_articles_by_ids(self, article_ids: Sequence[int]) -> list[dict[str, Any]]:
        if not article_ids:
            return []
        pool = await self._get_pool()
        rows = await pool.fetch(
            f"""
            select {ARTICLE_COLUMNS_SQL}
            from wp_posts p
            where p.id = any($1::bigint[])
              and {VISIBLE_POST_SQL}
            order by p.post_date_gmt desc
            """,
            list(article_ids),
        )
        return [self._article_row_to_dict(row) for row in rows]

    async def list_articles_by_authors(self, author_ids: Sequence[int]) -> list[dict[str, Any]]:
        if not author_ids:
            return []
        pool = await self._get_pool()
        rows = await pool.fetch(
            f"""
            select {ARTICLE_COLUMNS_SQL}
            from wp_posts p
            where p.post_author = any($1::bigint[])
              and {VISIBLE_POST_SQL}
            order by p.post_date_gmt desc
            """,
            list(author_ids),
        )
        return [self._article_row_to_dict(row) for row in rows]

    async def get_article_by_slug(self, slug: str) -> dict[str, Any]:
        return await self._fetch_article("p.post_name = $1", slug)

    async def get_article_by_id(self, article_id: int) -> dict[str, Any]:
        return await self._fetch_article("p.id = $1", article_id)

    async def get_author_by_slug(self, slug: str) -> dict[str, Any]:
        return await self._fetch_author("u.user_nicename = $1", slug)

    async def get_author_by_id(self, author_id: int) -> dict[str, Any]:
        return await self._fetch_author("u.id = $1", author_id)

    async def get_featured_image(self, post_id: int) -> dict[str, Any] | None:
        pool = await self._get_pool()
        row = await pool.fetchrow(
            """
            select
              a.guid,
              a.post_mime_type,
              a.post_excerpt,
              alt.meta_value as alt
            from wp_postmeta thumb
            join wp_posts a
              on a.id = case when thumb.meta_value ~ '^[0-9]+$' then thumb.meta_value::bigint end
            left join wp_postmeta alt
              on alt.post_id = a.id and alt.meta_key = '_wp_attachment_image_alt'
            where thumb.post_id = $1
              and thumb.meta_key = '_thumbnail_id'
            limit 1
            """,
            post_id,
        )
        if row is None:
            return None
        return {
            "url": row["guid"],
            "mime_type": row["post_mime_type"],
            "caption": row["post_excerpt"],
            "alt": row["alt"],
        }

    async def _fetch_article(self, where_sql: str, value: Any) -> dict[str, Any]:
        pool = await self._get_pool()
        row = await pool.fetchrow(
            f"""
            select {ARTICLE_COLUMNS_SQL}
            from wp_posts p
            where {where_sql}
              and {VISIBLE_POST_SQL}
            limit 1
            """,
            value,
        )
        if row is None:
            raise RepositoryNotFoundError("article not found")
        return self._article_row_to_dict(row)

    async def _fetch_author(self, where_sql: str, value: Any) -> dict[str, Any]:
        pool = await self._get_pool()
        row = await pool.fetchrow(
            f"""
            select
              u.id,
              u.user_nicename,
              u.display_name,
              (
                select um.meta_value
                from wp_usermeta um
                where um.user_id = u.id and um.meta_key = 'description'
                limit 1
              ) as bio
            from wp_users u
            where {where_sql}
            limit 1
            """,
            value,
        )
        if row is None:
            raise RepositoryNotFoundError("author not found")
        return {
            "id": int(row["id"]),
            "slug": row["user_nicename"],
            "name": row["display_name"],
            "bio": row["bio"],
        }

    async def _get_pool(self) -> asyncpg.Pool:
        if not self.database_url:
            raise RepositoryUnavailableError("GW_DATABASE_URL is required")

        if self._pool is not None:
            return self._pool

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self.database_url,
                min_size=self.min_pool_size,
                max_size=self.max_pool_size,
                command_timeout=self.command_timeout_seconds,
            )
            return self._pool
        except Exception as exc:  # pragma: no cover - depends on environment
            raise RepositoryUnavailableError("database unavailable") from exc

    @staticmethod
    def _article_row_to_dict(row: asyncpg.Record) -> dict[str, Any]:
        return {
            "id": int(row["id"]),
            "slug": row["post_name"],
            "published_at": row["post_date_gmt"],
            "updated_at": row["post_modified_gmt"],
            "title": row["post_title"],
            "content": row["post_content"],
            "author_id": int(row["post_author"]),
        }


@lru_cache
def get_repository() -> PostgresRepository:
    settings = get_settings()
    return PostgresRepository(
        database_url=settings.database_url,
        min_pool_size=settings.database_pool_min_size,
        max_pool_size=settings.database_pool_max_size,
        command_timeout_seconds=settings.database_command_timeout_seconds,
    )
