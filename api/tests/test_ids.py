from __future__ import annotations

import random

import pytest

from gateway.core.config import ConfigurationError, Settings
from hashids import Hashids

from gateway.core.ids import ARTICLE, AUTHOR, MAX_INTERNAL_ID, IdCodec, InvalidIdentifier, NamespaceConfig, build_id_codec


def _codec() -> IdCodec:
    return build_id_codec(Settings())


def test_round_trips_sampled_range() -> None:
    codec = _codec()
    rng = random.Random(20240101)
    samples = list(range(0, 2000)) + [rng.randrange(0, 10_000_000) for _ in range(3000)] + [9_999_999]

    for namespace in (AUTHOR, ARTICLE):
        for value in samples:
            assert codec.decode(namespace, codec.encode(namespace, value)) == value


def test_same_integer_differs_across_namespaces() -> None:
    codec = _codec()
    assert codec.encode(AUTHOR, 7) != codec.encode(ARTICLE, 7)


def test_encoding_is_deterministic_and_padded() -> None:
    codec = _codec()
    first = codec.encode(AUTHOR, 42)
    assert first == _codec().encode(AUTHOR, 42)
    assert len(first) >= 10
    assert codec.encode(AUTHOR, 1) != "1"


def test_consecutive_ids_do_not_look_sequential() -> None:
    codec = _codec()
    encoded = [codec.encode(ARTICLE, value) for value in range(0, 1000)]
    assert encoded != sorted(encoded)
    assert len(set(encoded)) == len(encoded)


def test_decode_rejects_foreign_strings() -> None:
    codec = _codec()
    with pytest.raises(InvalidIdentifier):
        codec.decode(AUTHOR, "not-a-real-id")
    with pytest.raises(InvalidIdentifier):
        codec.decode(AUTHOR, "")


def test_decode_rejects_id_from_other_namespace() -> None:
    codec = _codec()
    article_id = codec.encode(ARTICLE, 7)
    with pytest.raises(InvalidIdentifier):
        codec.decode(AUTHOR, article_id)


def test_decode_rejects_tampered_id() -> None:
    codec = _codec()
    public_id = codec.encode(AUTHOR, 123)
    tampered = public_id[:-1] + ("a" if public_id[-1] != "a" else "b")
    with pytest.raises(InvalidIdentifier):
        codec.decode(AUTHOR, tampered)


def test_encode_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        _codec().encode(AUTHOR, -1)


def test_encode_rejects_values_beyond_bigint() -> None:
    with pytest.raises(ValueError):
        _codec().encode(ARTICLE, MAX_INTERNAL_ID + 1)


def test_decode_rejects_ids_beyond_bigint() -> None:
    codec = _codec()
    oversized = Hashids(salt="article", min_length=10).encode(2**70)
    with pytest.raises(InvalidIdentifier):
        codec.decode(ARTICLE, oversized)

    largest = codec.encode(ARTICLE, MAX_INTERNAL_ID)
    assert codec.decode(ARTICLE, largest) == MAX_INTERNAL_ID


def test_unknown_namespace_is_a_lookup_error() -> None:
    with pytest.raises(LookupError):
        _codec().encode("image", 1)


def test_missing_salt_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        build_id_codec(Settings(author_id_salt=""))
    with pytest.raises(ConfigurationError):
        build_id_codec(Settings(article_id_salt=None))


def test_shared_salt_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        IdCodec({"a": NamespaceConfig(salt="same"), "b": NamespaceConfig(salt="same")})
