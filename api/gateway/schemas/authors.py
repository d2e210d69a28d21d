from pydantic import BaseModel


class AuthorOut(BaseModel):
    id: str
    slug: str
    name: str
    bio: str | None = None


class AuthorDetailOut(AuthorOut):
    canonical: AuthorOut | None = None
