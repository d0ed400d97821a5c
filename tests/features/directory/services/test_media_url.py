"""Tests for media URL construction."""

import pytest

from orgwalk.db.directory import CallerError
from orgwalk.features.directory.services.media_url import (
    ImageFit,
    MediaKind,
    PhotoVariant,
    build_media_url,
)

BASE = "https://api.example.com/v1"


class TestBuildMediaUrl:
    """Tests for build_media_url."""

    def test_plain_profile_photo(self):
        assert (
            build_media_url(BASE, "p1") == f"{BASE}/media/people/p1/profile-photo"
        )

    def test_key_is_path_encoded(self):
        url = build_media_url(BASE + "/", "pat@example.com")

        assert url == f"{BASE}/media/people/pat%40example.com/profile-photo"

    def test_options_become_query_parameters(self):
        url = build_media_url(
            BASE,
            "p1",
            kind=MediaKind.BACKGROUND_PHOTO,
            preferred_type=PhotoVariant.OFFICIAL,
            height=120,
            width=80,
            fit=ImageFit.CROP,
        )

        assert url == (
            f"{BASE}/media/people/p1/background-photo"
            "?preferredType=official&height=120&width=80&fit=crop"
        )

    def test_string_options_are_accepted(self):
        url = build_media_url(BASE, "p1", kind="profile-photo", fit="scale")

        assert url.endswith("/profile-photo?fit=scale")

    def test_token_is_only_embedded_on_request(self):
        without = build_media_url(BASE, "p1", media_token="secret")
        with_token = build_media_url(
            BASE, "p1", media_token="secret", token_in_query=True
        )

        assert "secret" not in without
        assert with_token.endswith("?token=secret")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"key": ""},
            {"key": "  "},
            {"key": "p1", "kind": "avatar"},
            {"key": "p1", "fit": "stretch"},
            {"key": "p1", "preferred_type": "fancy"},
        ],
    )
    def test_invalid_input_raises_caller_error(self, kwargs):
        with pytest.raises(CallerError):
            build_media_url(BASE, **kwargs)
