#!/usr/bin/env python3
"""Validate merge-group and category files before a deploy."""

from __future__ import annotations

import argparse
import sys

from gateway.core.categories import load_category_catalog
from gateway.core.config import ConfigurationError
from gateway.core.identity import load_identity_resolver


def render_summary(*, merge_path: str | None, categories_path: str | None) -> str:
    identity = load_identity_resolver(merge_path)
    catalog = load_category_catalog(categories_path)

    lines = [f"merge groups: {len(identity.groups)}"]
    for group in identity.groups:
        others = ", ".join(str(raw_id) for raw_id in sorted(group.other_ids())) or "-"
        lines.append(f"  {group.name}: {group.to} <- {others}")
    lines.append(f"categories: {len(catalog)}")
    for category in catalog.categories():
        kind = "section" if category.is_section else "aggregate"
        tags = ", ".join(str(tag) for tag in category.wordpress_tags)
        lines.append(f"  {category.slug} ({kind}): {tags}")
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate gateway merge and category configuration.")
    parser.add_argument("--merge", help="Path to the author merge-group YAML file")
    parser.add_argument("--categories", help="Path to the category YAML file")
    args = parser.parse_args()

    try:
        print(render_summary(merge_path=args.merge, categories_path=args.categories))
    except ConfigurationError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
