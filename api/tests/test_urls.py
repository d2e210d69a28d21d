from gateway.core.urls import append_tracking_params, rewrite_media_url


def test_rewrite_media_url_moves_upload_onto_public_host() -> None:
    rewritten = rewrite_media_url(
        "http://wp.internal:8080/wp-content/uploads/2024/01/photo.jpg?ver=2",
        "https://cms.studentnewspaper.org/",
    )
    assert rewritten == "https://cms.studentnewspaper.org/wp-content/uploads/2024/01/photo.jpg?ver=2"


def test_rewrite_media_url_without_query() -> None:
    rewritten = rewrite_media_url("https://old.example.org/a.png", "https://media.example.org")
    assert rewritten == "https://media.example.org/a.png"


def test_append_tracking_params_adds_missing_utm_values() -> None:
    link = append_tracking_params(
        "https://shop.example.com/offer?ref=paper",
        {
            "tracking_source": "newspaper",
            "tracking_medium": "banner",
            "tracking_campaign": None,
            "tracking_campaign_id": "42",
        },
    )
    assert link == "https://shop.example.com/offer?ref=paper&utm_source=newspaper&utm_medium=banner&utm_id=42"


def test_append_tracking_params_keeps_existing_values() -> None:
    link = append_tracking_params(
        "https://shop.example.com/offer?utm_source=partner",
        {"tracking_source": "newspaper", "tracking_medium": "banner"},
    )
    assert link == "https://shop.example.com/offer?utm_source=partner&utm_medium=banner"


def test_append_tracking_params_normalizes_empty_path() -> None:
    assert append_tracking_params("https://shop.example.com", {}) == "https://shop.example.com/"
