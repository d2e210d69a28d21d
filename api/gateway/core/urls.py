from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = (
    ("utm_source", "tracking_source"),
    ("utm_medium", "tracking_medium"),
    ("utm_campaign", "tracking_campaign"),
    ("utm_id", "tracking_campaign_id"),
)


def rewrite_media_url(raw_url: str, media_base_url: str) -> str:
    """Move a WordPress upload URL onto the public media host, keeping path and query."""
    parsed = urlsplit(raw_url.strip())
    base = urlsplit(media_base_url.strip().rstrip("/"))
    query = f"?{parsed.query}" if parsed.query else ""
    return f"{urlunsplit((base.scheme, base.netloc, base.path, '', ''))}{parsed.path}{query}"


def append_tracking_params(raw_url: str, tracking: dict[str, str | None]) -> str:
    """Add UTM parameters from advert tracking fields unless the link already sets them."""
    parsed = urlsplit(raw_url.strip())
    query_pairs = parse_qsl(parsed.query, keep_blank_values=True)
    present = {key for key, _ in query_pairs}

    for param, field_name in TRACKING_PARAMS:
        value = tracking.get(field_name)
        if value is None or param in present:
            continue
        query_pairs.append((param, value))

    query = urlencode(query_pairs, doseq=True)
    path = parsed.path or "/"
    return urlunsplit((parsed.scheme, parsed.netloc, path, query, parsed.fragment))
