from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from gateway.core.categories import CategoryCatalog, load_category_catalog
from gateway.core.config import Settings, get_settings
from gateway.core.identity import IdentityResolver, load_identity_resolver
from gateway.core.ids import IdCodec, build_id_codec


@dataclass(frozen=True, slots=True)
class ContentConfig:
    """Static configuration built once per process and shared by reference."""

    identity: IdentityResolver
    ids: IdCodec
    categories: CategoryCatalog


def load_content_config(settings: Settings) -> ContentConfig:
    return ContentConfig(
        identity=load_identity_resolver(settings.merge_config_path),
        ids=build_id_codec(settings),
        categories=load_category_catalog(settings.categories_config_path),
    )


@lru_cache
def get_content_config() -> ContentConfig:
    return load_content_config(get_settings())
