from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from gateway.core.config import ConfigurationError


@dataclass(frozen=True, slots=True)
class MergeGroup:
    name: str
    to: int
    aliases: frozenset[int] = frozenset()
    include: frozenset[int] = frozenset()

    def other_ids(self) -> frozenset[int]:
        return (self.aliases | self.include) - {self.to}


@dataclass(frozen=True, slots=True)
class RelatedIds:
    canonical_id: int
    other_ids: frozenset[int]

    def all_ids(self) -> list[int]:
        return sorted(self.other_ids | {self.canonical_id})


class IdentityResolver:
    """Read-only view over merged author accounts.

    Aliases (`from`) resolve to the group's canonical id. Extra siblings
    (`include`) never resolve anywhere on their own; they only widen the set of
    raw ids that count as the canonical author's content.
    """

    def __init__(self, groups: Iterable[MergeGroup] = ()) -> None:
        self._groups = tuple(groups)
        self._canonical_by_alias: dict[int, int] = {}
        self._group_by_member: dict[int, MergeGroup] = {}
        owner_by_id: dict[int, str] = {}

        for group in self._groups:
            for raw_id in {group.to} | group.aliases | group.include:
                owner = owner_by_id.get(raw_id)
                if owner is not None and owner != group.name:
                    raise ConfigurationError(
                        f"author id {raw_id} appears in merge groups '{owner}' and '{group.name}'"
                    )
                owner_by_id[raw_id] = group.name
            for alias in group.aliases:
                self._canonical_by_alias[alias] = group.to
                self._group_by_member[alias] = group
            self._group_by_member[group.to] = group

    @property
    def groups(self) -> tuple[MergeGroup, ...]:
        return self._groups

    def canonicalize(self, raw_id: int) -> int:
        return self._canonical_by_alias.get(raw_id, raw_id)

    def related_ids(self, raw_id: int) -> RelatedIds:
        group = self._group_by_member.get(raw_id)
        if group is None:
            return RelatedIds(canonical_id=raw_id, other_ids=frozenset())
        return RelatedIds(canonical_id=group.to, other_ids=group.other_ids())


def parse_merge_groups(raw: Any) -> list[MergeGroup]:
    if raw is None:
        return []
    if not isinstance(raw, Mapping):
        raise ConfigurationError("merge configuration must map group names to groups")

    groups: list[MergeGroup] = []
    for name, body in raw.items():
        group_name = str(name)
        if not isinstance(body, Mapping):
            raise ConfigurationError(f"merge group '{group_name}' must be a mapping")
        unknown = set(body) - {"to", "from", "include"}
        if unknown:
            raise ConfigurationError(f"merge group '{group_name}' has unknown keys: {sorted(unknown)}")
        if "to" not in body:
            raise ConfigurationError(f"merge group '{group_name}' is missing 'to'")
        groups.append(
            MergeGroup(
                name=group_name,
                to=_as_author_id(body["to"], group_name=group_name, field="to"),
                aliases=_as_author_ids(body.get("from"), group_name=group_name, field="from"),
                include=_as_author_ids(body.get("include"), group_name=group_name, field="include"),
            )
        )
    return groups


def load_identity_resolver(path: str | Path | None) -> IdentityResolver:
    if path is None:
        return IdentityResolver()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read merge configuration {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"merge configuration {path} is not valid YAML: {exc}") from exc
    return IdentityResolver(parse_merge_groups(raw))


def _as_author_id(value: Any, *, group_name: str, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"merge group '{group_name}' field '{field}' must hold non-negative integers")
    return value


def _as_author_ids(value: Any, *, group_name: str, field: str) -> frozenset[int]:
    if value is None:
        return frozenset()
    if not isinstance(value, list):
        raise ConfigurationError(f"merge group '{group_name}' field '{field}' must be a list")
    return frozenset(_as_author_id(item, group_name=group_name, field=field) for item in value)
