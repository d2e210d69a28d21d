"""Keyset pagination over category/tag memberships.

Memberships are ordered by the composite key (object_id desc,
term_taxonomy_id asc). A page is fetched with one extra lookahead row, so the
presence of a following page is known without a count query, and the cursor
handed back to the client is the key of the last row actually delivered.

Cursor tokens are the two key fields as decimal text, percent-escaped and
joined with ``//``. Clients round-trip them across requests, so the format is
a compatibility contract.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import quote, unquote

from gateway.core.ids import MAX_INTERNAL_ID

CURSOR_DELIMITER = "//"
_DECIMAL_RE = re.compile(r"0|[1-9][0-9]*")
_MAX_KEY_DIGITS = len(str(MAX_INTERNAL_ID))


class InvalidCursor(ValueError):
    """Raised when a client-supplied cursor does not parse into a membership key."""


@dataclass(frozen=True, slots=True)
class MembershipKey:
    object_id: int
    term_taxonomy_id: int


@dataclass(frozen=True, slots=True)
class ArticlePage:
    ids: list[int] = field(default_factory=list)
    has_next_page: bool = False
    next_cursor: str | None = None


class MembershipQuery(Protocol):
    async def fetch_memberships(
        self,
        *,
        taxonomy_ids: Sequence[int],
        after: MembershipKey | None,
        limit: int,
    ) -> list[MembershipKey]:
        """Visible memberships strictly after `after`, one row per object, at most `limit` rows."""
        ...


def encode_cursor(key: MembershipKey) -> str:
    return CURSOR_DELIMITER.join(
        quote(str(int(part)), safe="") for part in (key.object_id, key.term_taxonomy_id)
    )


def decode_cursor(token: str) -> MembershipKey:
    if not isinstance(token, str) or not token:
        raise InvalidCursor("cursor must be a non-empty string")

    parts = token.split(CURSOR_DELIMITER)
    if len(parts) != 2:
        raise InvalidCursor(f"malformed cursor: {token!r}")

    values: list[int] = []
    for part in parts:
        try:
            text = unquote(part, errors="strict")
        except UnicodeDecodeError as exc:
            raise InvalidCursor(f"malformed cursor: {token!r}") from exc
        if not _DECIMAL_RE.fullmatch(text) or len(text) > _MAX_KEY_DIGITS or int(text) > MAX_INTERNAL_ID:
            raise InvalidCursor(f"malformed cursor: {token!r}")
        values.append(int(text))

    return MembershipKey(object_id=values[0], term_taxonomy_id=values[1])


def sort_key(key: MembershipKey) -> tuple[int, int]:
    return (-key.object_id, key.term_taxonomy_id)


def follows(key: MembershipKey, cursor: MembershipKey) -> bool:
    """Whether `key` sorts strictly after `cursor` in (object_id desc, term_taxonomy_id asc) order."""
    if key.object_id != cursor.object_id:
        return key.object_id < cursor.object_id
    return key.term_taxonomy_id > cursor.term_taxonomy_id


def resumes_after(key: MembershipKey, cursor: MembershipKey) -> bool:
    # The cursor's object was the last one delivered; its other memberships
    # would repeat it on the next page.
    return follows(key, cursor) and key.object_id != cursor.object_id


def select_page_rows(
    rows: Iterable[MembershipKey],
    *,
    after: MembershipKey | None,
    limit: int,
) -> list[MembershipKey]:
    """Apply ordering, continuation, per-object dedupe and limit to already-filtered rows."""
    ordered = sorted(rows, key=sort_key)
    selected: list[MembershipKey] = []
    seen: set[int] = set()
    for row in ordered:
        if after is not None and not resumes_after(row, after):
            continue
        if row.object_id in seen:
            continue
        seen.add(row.object_id)
        selected.append(row)
        if len(selected) >= limit:
            break
    return selected


async def request_page(
    query: MembershipQuery,
    taxonomy_ids: Iterable[int],
    page_size: int,
    cursor: str | None = None,
) -> ArticlePage:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    after = decode_cursor(cursor) if cursor is not None else None
    keys = sorted(set(taxonomy_ids))
    if not keys:
        return ArticlePage()

    rows = await query.fetch_memberships(taxonomy_ids=keys, after=after, limit=page_size + 1)
    if not rows:
        return ArticlePage()

    body = rows[:page_size]
    return ArticlePage(
        ids=[row.object_id for row in body],
        has_next_page=len(rows) == page_size + 1,
        next_cursor=encode_cursor(body[-1]),
    )
