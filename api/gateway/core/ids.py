"""Opaque public identifiers for internal integer keys.

Each namespace owns a Hashids instance seeded with its own salt, so the same
integer renders differently per namespace and a string issued for one
namespace does not decode in another. Issued ids are embedded in shared links;
changing a salt or minimum length invalidates every id already handed out.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from hashids import Hashids

from gateway.core.config import ConfigurationError, Settings

AUTHOR = "author"
ARTICLE = "article"

# Keys are stored in bigint columns.
MAX_INTERNAL_ID = 2**63 - 1


class InvalidIdentifier(ValueError):
    """Raised when a public id was not produced by the namespace's encoder."""


@dataclass(frozen=True, slots=True)
class NamespaceConfig:
    salt: str
    min_length: int = 10


class IdCodec:
    def __init__(self, namespaces: Mapping[str, NamespaceConfig]) -> None:
        if not namespaces:
            raise ConfigurationError("at least one id namespace is required")

        hashers: dict[str, Hashids] = {}
        seen: dict[tuple[str, int], str] = {}
        for name, config in namespaces.items():
            salt = config.salt
            if not isinstance(salt, str) or not salt.strip():
                raise ConfigurationError(f"id namespace '{name}' has no salt configured")
            if config.min_length < 0:
                raise ConfigurationError(f"id namespace '{name}' has a negative minimum length")
            signature = (salt, config.min_length)
            if signature in seen:
                raise ConfigurationError(
                    f"id namespaces '{seen[signature]}' and '{name}' share a salt and would collide"
                )
            seen[signature] = name
            hashers[name] = Hashids(salt=salt, min_length=config.min_length)
        self._hashers = hashers

    @property
    def namespaces(self) -> frozenset[str]:
        return frozenset(self._hashers)

    def encode(self, namespace: str, value: int) -> str:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_INTERNAL_ID:
            raise ValueError(f"only non-negative bigint keys can be encoded, got {value!r}")
        return self._hasher(namespace).encode(value)

    def decode(self, namespace: str, public_id: str) -> int:
        """Parse an untrusted public id back to its integer key.

        Hashids re-encodes what it decodes and returns an empty tuple on any
        mismatch, so a string from another namespace or a tampered string is
        rejected rather than mapped to an arbitrary integer.
        """
        hasher = self._hasher(namespace)
        if not isinstance(public_id, str) or not public_id:
            raise InvalidIdentifier(f"invalid {namespace} id")
        values = hasher.decode(public_id)
        if len(values) != 1 or values[0] > MAX_INTERNAL_ID:
            raise InvalidIdentifier(f"invalid {namespace} id: {public_id}")
        return int(values[0])

    def _hasher(self, namespace: str) -> Hashids:
        try:
            return self._hashers[namespace]
        except KeyError:
            raise LookupError(f"unknown id namespace: {namespace}") from None


def build_id_codec(settings: Settings) -> IdCodec:
    return IdCodec(
        {
            AUTHOR: NamespaceConfig(salt=settings.author_id_salt or "", min_length=settings.id_min_length),
            ARTICLE: NamespaceConfig(salt=settings.article_id_salt or "", min_length=settings.id_min_length),
        }
    )
