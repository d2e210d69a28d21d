from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from gateway.services.pagination import MembershipKey, select_page_rows
from gateway.services.repository import RepositoryNotFoundError


class InMemoryContentStore:
    """Dictionary-backed stand-in for the WordPress tables."""

    def __init__(self) -> None:
        self.posts: dict[int, dict[str, Any]] = {}
        self.memberships: list[MembershipKey] = []
        self.authors: dict[int, dict[str, Any]] = {}
        self.images: dict[int, dict[str, Any]] = {}
        self.queries: list[dict[str, Any]] = []

    def add_post(
        self,
        post_id: int,
        *,
        author_id: int = 1,
        slug: str | None = None,
        title: str | None = None,
        content: str = "",
        published_at: datetime | None = None,
        updated_at: datetime | None = None,
        status: str = "publish",
        post_type: str = "post",
        thumbnail_id: int | None = None,
    ) -> None:
        published = published_at or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.posts[post_id] = {
            "id": post_id,
            "slug": slug or f"post-{post_id}",
            "published_at": published,
            "updated_at": updated_at or published,
            "title": title or f"Post {post_id}",
            "content": content,
            "author_id": author_id,
            "status": status,
            "post_type": post_type,
            "thumbnail_id": thumbnail_id,
        }

    def add_membership(self, object_id: int, term_taxonomy_id: int) -> None:
        self.memberships.append(MembershipKey(object_id=object_id, term_taxonomy_id=term_taxonomy_id))

    def add_author(self, author_id: int, *, slug: str, name: str, bio: str | None = None) -> None:
        self.authors[author_id] = {"id": author_id, "slug": slug, "name": name, "bio": bio}

    def add_image(
        self,
        image_id: int,
        *,
        url: str,
        mime_type: str | None = None,
        caption: str | None = None,
        alt: str | None = None,
    ) -> None:
        self.images[image_id] = {"url": url, "mime_type": mime_type, "caption": caption, "alt": alt}

    async def close(self) -> None:
        return None

    async def fetch_memberships(
        self,
        *,
        taxonomy_ids: Sequence[int],
        after: MembershipKey | None,
        limit: int,
    ) -> list[MembershipKey]:
        self.queries.append({"taxonomy_ids": list(taxonomy_ids), "after": after, "limit": limit})
        wanted = set(taxonomy_ids)
        candidates = [
            row
            for row in self.memberships
            if row.term_taxonomy_id in wanted and self._is_visible(self.posts.get(row.object_id))
        ]
        return select_page_rows(candidates, after=after, limit=limit)

    async def list_articles_by_ids(self, article_ids: Sequence[int]) -> list[dict[str, Any]]:
        wanted = set(article_ids)
        return self._visible_articles(lambda post: post["id"] in wanted)

    async def list_articles_by_authors(self, author_ids: Sequence[int]) -> list[dict[str, Any]]:
        wanted = set(author_ids)
        return self._visible_articles(lambda post: post["author_id"] in wanted)

    async def get_article_by_slug(self, slug: str) -> dict[str, Any]:
        rows = self._visible_articles(lambda post: post["slug"] == slug)
        if not rows:
            raise RepositoryNotFoundError("article not found")
        return rows[0]

    async def get_article_by_id(self, article_id: int) -> dict[str, Any]:
        rows = self._visible_articles(lambda post: post["id"] == article_id)
        if not rows:
            raise RepositoryNotFoundError("article not found")
        return rows[0]

    async def get_author_by_slug(self, slug: str) -> dict[str, Any]:
        for author in self.authors.values():
            if author["slug"] == slug:
                return dict(author)
        raise RepositoryNotFoundError("author not found")

    async def get_author_by_id(self, author_id: int) -> dict[str, Any]:
        author = self.authors.get(author_id)
        if author is None:
            raise RepositoryNotFoundError("author not found")
        return dict(author)

    async def get_featured_image(self, post_id: int) -> dict[str, Any] | None:
        post = self.posts.get(post_id)
        if post is None or post["thumbnail_id"] is None:
            return None
        image = self.images.get(post["thumbnail_id"])
        return dict(image) if image is not None else None

    def _visible_articles(self, predicate) -> list[dict[str, Any]]:
        rows = [
            self._article(post)
            for post in self.posts.values()
            if self._is_visible(post) and predicate(post)
        ]
        rows.sort(key=lambda row: row["published_at"], reverse=True)
        return rows

    @staticmethod
    def _is_visible(post: dict[str, Any] | None) -> bool:
        if post is None:
            return False
        return (
            post["status"] == "publish"
            and post["post_type"] == "post"
            and post["published_at"] <= datetime.now(timezone.utc)
        )

    @staticmethod
    def _article(post: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": post["id"],
            "slug": post["slug"],
            "published_at": post["published_at"],
            "updated_at": post["updated_at"],
            "title": post["title"],
            "content": post["content"],
            "author_id": post["author_id"],
        }
