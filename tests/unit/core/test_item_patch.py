"""
Tests unitaires pour l'objet valeur ItemPatch.

Verifie:
- La distinction champ absent (UNSET) / champ present a None
- La normalisation des textes, annees, genres et liens
- L'application a une fiche : seuls les champs presents changent
"""

from datetime import datetime

import pytest

from cineamore.core.entities import CatalogueItem
from cineamore.core.errors import ValidationError
from cineamore.core.value_objects import UNSET, DownloadLink, ItemPatch


class TestItemPatchFields:
    """Tests de presence des champs."""

    def test_default_patch_is_empty(self) -> None:
        patch = ItemPatch()
        assert patch.is_empty()
        assert patch.fields() == {}
        assert patch.plot is UNSET

    def test_fields_returns_only_present_fields(self) -> None:
        patch = ItemPatch(title="Alien", year=1979)
        assert patch.fields() == {"title": "Alien", "year": 1979}

    def test_present_none_is_kept(self) -> None:
        """Un champ a None est present : il videra le champ de la fiche."""
        patch = ItemPatch(plot=None)
        assert patch.fields() == {"plot": None}
        assert not patch.is_empty()

    def test_unset_is_falsy_and_has_readable_repr(self) -> None:
        assert not UNSET
        assert repr(UNSET) == "UNSET"

    def test_only_restricts_fields(self) -> None:
        patch = ItemPatch(title="Alien", year=1979, director="Ridley Scott")
        assert patch.only("title", "year").fields() == {"title": "Alien", "year": 1979}


class TestItemPatchNormalisation:
    """Tests de nettoyage et de validation."""

    def test_text_is_stripped(self) -> None:
        patch = ItemPatch(title="  Alien  ", director=" Ridley Scott ")
        assert patch.title == "Alien"
        assert patch.director == "Ridley Scott"

    def test_blank_text_becomes_none(self) -> None:
        assert ItemPatch(plot="   ").plot is None

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_blank_title_rejected(self, title) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ItemPatch(title=title)
        assert exc_info.value.details["field"] == "title"

    def test_non_text_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ItemPatch(director=42)

    def test_year_from_string(self) -> None:
        assert ItemPatch(year="1979").year == 1979

    def test_empty_year_becomes_none(self) -> None:
        assert ItemPatch(year="").year is None

    @pytest.mark.parametrize("year", [1879, 2101, "abc", True])
    def test_invalid_year_rejected(self, year) -> None:
        with pytest.raises(ValidationError):
            ItemPatch(year=year)

    def test_genres_from_comma_string_deduplicated(self) -> None:
        patch = ItemPatch(genres="Drama, Thriller, Drama, ")
        assert patch.genres == ("Drama", "Thriller")

    def test_links_from_dicts(self) -> None:
        patch = ItemPatch(
            download_links=[
                {"label": "1080p", "url": "https://example.org/a", "added_at": "2024-03-01T10:00:00"}
            ]
        )
        assert patch.download_links == (
            DownloadLink("1080p", "https://example.org/a", datetime(2024, 3, 1, 10, 0)),
        )

    def test_link_without_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ItemPatch(download_links=[{"label": "1080p", "url": ""}])

    @pytest.mark.parametrize(
        "payload,field",
        [
            ({"genres": 5}, "genres"),
            ({"genres": {"name": "Drama"}}, "genres"),
            ({"download_links": "https://example.org/a"}, "download_links"),
            ({"download_links": 3}, "download_links"),
            ({"download_links": [{"label": 5, "url": "https://x"}]}, "download_links.label"),
            ({"download_links": [{"label": "HD", "url": ["x"]}]}, "download_links.url"),
            (
                {"download_links": [{"label": "HD", "url": "https://x", "added_at": "hier"}]},
                "download_links.added_at",
            ),
            (
                {"download_links": [{"label": "HD", "url": "https://x", "added_at": 12}]},
                "download_links.added_at",
            ),
        ],
    )
    def test_malformed_shapes_raise_validation_error(self, payload, field) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ItemPatch.from_dict(payload)
        assert exc_info.value.details["field"] == field


class TestItemPatchFromDict:
    """Tests de construction depuis un dict."""

    def test_missing_keys_stay_unset(self) -> None:
        patch = ItemPatch.from_dict({"title": "Alien"})
        assert patch.year is UNSET

    def test_null_key_is_present(self) -> None:
        patch = ItemPatch.from_dict({"poster": None})
        assert patch.fields() == {"poster": None}

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ItemPatch.from_dict({"title": "Alien", "rating_sum": 50})
        assert exc_info.value.details["fields"] == ["rating_sum"]

    def test_to_dict_is_json_friendly(self) -> None:
        patch = ItemPatch(
            title="Alien",
            genres=("Horror",),
            download_links=[{"label": "HD", "url": "https://example.org/a"}],
            notes=None,
        )
        assert patch.to_dict() == {
            "title": "Alien",
            "notes": None,
            "genres": ["Horror"],
            "download_links": [{"label": "HD", "url": "https://example.org/a", "added_at": None}],
        }

    def test_to_dict_then_from_dict_keeps_presence(self) -> None:
        patch = ItemPatch(title="Alien", plot=None)
        assert ItemPatch.from_dict(patch.to_dict()) == patch


class TestItemPatchApply:
    """Tests d'application a une fiche."""

    def test_apply_changes_only_present_fields(self) -> None:
        item = CatalogueItem(id="1", title="Old", year=1979, director="Ridley Scott", plot="Plot")
        updated = ItemPatch(title="New").apply_to(item)
        assert updated.title == "New"
        assert updated.year == 1979
        assert updated.director == "Ridley Scott"
        assert updated.plot == "Plot"
        assert item.title == "Old"

    def test_apply_none_clears_field(self) -> None:
        item = CatalogueItem(id="1", title="Alien", plot="Plot")
        assert ItemPatch(plot=None).apply_to(item).plot is None

    def test_apply_none_genres_gives_empty_tuple(self) -> None:
        item = CatalogueItem(id="1", title="Alien", genres=("Horror",))
        assert ItemPatch(genres=None).apply_to(item).genres == ()

    def test_apply_replaces_genre_list(self) -> None:
        item = CatalogueItem(id="1", title="Alien", genres=("Horror",))
        assert ItemPatch(genres=["Drama"]).apply_to(item).genres == ("Drama",)
