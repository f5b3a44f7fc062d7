"""Tests for draftboard.storage.naming module.

Covers:
    - extract_extension: last-dot rule, character stripping, fallback
    - generate_image_key: {owner_id}-{epoch_millis}.{ext} format
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from draftboard.storage.naming import epoch_millis, extract_extension, generate_image_key


@pytest.mark.fast
class TestExtractExtension:
    """Tests for extract_extension()."""

    def test_simple(self):
        assert extract_extension("cat.png") == "png"

    def test_keeps_case(self):
        assert extract_extension("cat.JPG") == "JPG"

    def test_uses_last_dot(self):
        assert extract_extension("archive.tar.gz") == "gz"

    def test_strips_non_alphanumerics(self):
        assert extract_extension("photo.jp-e_g!") == "jpeg"

    def test_no_dot_falls_back(self):
        assert extract_extension("README") == "bin"

    def test_trailing_dot_falls_back(self):
        assert extract_extension("weird.") == "bin"

    def test_only_symbols_falls_back(self):
        assert extract_extension("file.$$$") == "bin"

    def test_none_falls_back(self):
        assert extract_extension(None) == "bin"

    def test_path_separators_removed(self):
        assert extract_extension("x.p/n\\g") == "png"


@pytest.mark.fast
class TestGenerateImageKey:
    """Tests for generate_image_key()."""

    def test_format(self):
        now = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert generate_image_key("u1", "cat.png", now) == "u1-1000.png"

    def test_naive_datetime_treated_as_utc(self):
        naive = datetime(1970, 1, 1, 0, 0, 2)
        assert generate_image_key("u1", "a.gif", naive) == "u1-2000.gif"

    def test_millisecond_resolution(self):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        a = generate_image_key("u1", "a.png", base)
        b = generate_image_key("u1", "a.png", base + timedelta(milliseconds=1))
        assert a != b

    def test_default_now(self):
        key = generate_image_key("owner-7", "shot.webp")
        assert re.fullmatch(r"owner-7-\d{13}\.webp", key)

    def test_unknown_extension(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        key = generate_image_key("u1", "blob", now)
        assert key == f"u1-{epoch_millis(now)}.bin"
