"""
Tests unitaires pour les fonctions utilitaires.
"""

import re

import pytest

from cineamore.utils.helpers import clean_release_title, new_legacy_id, normalize_username


class TestCleanReleaseTitle:
    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Alien 1080p BluRay x264", "Alien"),
            ("Dune 4K HEVC", "Dune"),
            ("The Matrix WEB-DL", "The Matrix"),
            ("Cats", "Cats"),
            ("Alien   Covenant  720p", "Alien Covenant"),
            ("", ""),
        ],
    )
    def test_release_tokens_removed(self, title: str, expected: str) -> None:
        assert clean_release_title(title) == expected

    def test_tokens_inside_words_are_kept(self) -> None:
        assert clean_release_title("Scamp") == "Scamp"


class TestNormalizeUsername:
    @pytest.mark.parametrize("raw", ["marie", " Marie ", "@marie", "@MARIE"])
    def test_canonical_form(self, raw: str) -> None:
        assert normalize_username(raw) == "marie"


def test_new_legacy_id_format() -> None:
    assert re.fullmatch(r"m[0-9a-f]{8}", new_legacy_id())
