from datetime import datetime

from pydantic import BaseModel, Field

from gateway.schemas.authors import AuthorOut


class ImageOut(BaseModel):
    url: str
    mime_type: str | None = None
    caption: str | None = None
    alt: str | None = None


class ArticleOut(BaseModel):
    id: str
    slug: str
    author_id: str
    title: str
    content: str
    published: datetime
    updated: datetime


class ArticleDetailOut(ArticleOut):
    author: AuthorOut
    featured_image: ImageOut | None = None


class ArticlesEdgeOut(BaseModel):
    has_next_page: bool
    last_cursor: str | None = None
    nodes: list[ArticleOut] = Field(default_factory=list)
