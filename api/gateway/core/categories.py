from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from gateway.core.config import ConfigurationError

CATEGORY_SLUG_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")


@dataclass(frozen=True, slots=True)
class Category:
    slug: str
    name: str
    is_section: bool
    wordpress_tags: tuple[int, ...]


class CategoryCatalog:
    """Categories in configuration order, looked up by slug.

    Non-section categories aggregate content from other sections (for instance
    a "featured" category) and are not part of site navigation.
    """

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: dict[str, Category] = {}
        for category in categories:
            if category.slug in self._categories:
                raise ConfigurationError(f"category '{category.slug}' is defined twice")
            self._categories[category.slug] = category

    def __len__(self) -> int:
        return len(self._categories)

    def categories(self) -> list[Category]:
        return list(self._categories.values())

    def get(self, slug: str) -> Category | None:
        return self._categories.get(slug)


def parse_categories(raw: Any) -> list[Category]:
    if raw is None:
        return []
    if not isinstance(raw, Mapping):
        raise ConfigurationError("category configuration must map slugs to categories")

    categories: list[Category] = []
    for slug, body in raw.items():
        if not isinstance(slug, str) or not CATEGORY_SLUG_RE.match(slug):
            raise ConfigurationError(f"invalid category slug: {slug!r}")
        if not isinstance(body, Mapping):
            raise ConfigurationError(f"category '{slug}' must be a mapping")
        name = body.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError(f"category '{slug}' is missing a name")
        tags = body.get("wordpress_tags")
        if not isinstance(tags, list) or not tags:
            raise ConfigurationError(f"category '{slug}' needs a non-empty 'wordpress_tags' list")
        if any(isinstance(tag, bool) or not isinstance(tag, int) or tag < 0 for tag in tags):
            raise ConfigurationError(f"category '{slug}' has a non-integer wordpress tag")
        is_section = body.get("is_section", True)
        if not isinstance(is_section, bool):
            raise ConfigurationError(f"category '{slug}' field 'is_section' must be a boolean")
        categories.append(
            Category(
                slug=slug,
                name=name.strip(),
                is_section=is_section,
                wordpress_tags=tuple(dict.fromkeys(tags)),
            )
        )
    return categories


def load_category_catalog(path: str | Path | None) -> CategoryCatalog:
    if path is None:
        return CategoryCatalog()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read category configuration {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"category configuration {path} is not valid YAML: {exc}") from exc
    return CategoryCatalog(parse_categories(raw))
