from pydantic import BaseModel, Field


class CategoryOut(BaseModel):
    slug: str
    name: str
    is_section: bool = Field(
        description=(
            "Non-section categories are meta-groupings of content. For instance, the featured category "
            "is not a section - it aggregates from other sections instead."
        )
    )
    wordpress_tags: list[int] = Field(default_factory=list)
