"""
Tests unitaires pour VisibilityService.

Ces tests verifient:
- Le balayage met en quarantaine les fiches incompletes, avec une raison
  listant les criteres en echec
- Une fiche en quarantaine disparait des listes publiques
- La correction + restauration rend la fiche visible
"""

from datetime import datetime, timezone

import pytest

from cineamore.core.entities import CatalogueItem, Quarantined, Role, Visible
from cineamore.core.errors import NotFoundError, Unauthorized, ValidationError
from cineamore.services.catalogue import CatalogueService
from cineamore.services.visibility import VisibilityService, describe_criteria, failed_criteria

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(uow) -> VisibilityService:
    return VisibilityService(uow, clock=lambda: FIXED_NOW)


class TestCriteria:
    """Tests des fonctions de criteres."""

    def test_sentinel_genre_counts_as_missing(self) -> None:
        item = CatalogueItem(title="X", genres=("Uncategorized",), poster="p", plot="p")
        assert failed_criteria(item, ["missing_genre"], "Uncategorized") == ["missing_genre"]

    def test_order_follows_configuration(self) -> None:
        item = CatalogueItem(title="X")
        failed = failed_criteria(item, ["missing_plot", "missing_genre"], "Uncategorized")
        assert describe_criteria(failed) == "Missing plot, Missing genre"

    def test_unknown_criterion_is_refused(self, uow) -> None:
        with pytest.raises(ValueError):
            VisibilityService(uow, criteria=["missing_trailer"])


class TestSweep:
    """Tests de sweep()."""

    def test_sweep_hides_incomplete_item(self, service, uow, make_item) -> None:
        complete = make_item(title="Complete")
        incomplete = make_item(title="Incomplete", genres=(), poster=None)

        result = service.sweep(role=Role.ADMIN)

        assert result.quarantined == 1
        assert result.reasons == {incomplete.id: "Missing genre, Missing poster"}
        with uow:
            hidden = uow.catalogue.get_by_id(incomplete.id)
        assert hidden.visibility == Quarantined(
            reason="Missing genre, Missing poster", updated_at=FIXED_NOW
        )
        browse_ids = [i.id for i in CatalogueService(uow).browse()]
        assert browse_ids == [complete.id]

    def test_sweep_is_idempotent(self, service, make_item) -> None:
        make_item(plot=None)
        assert service.sweep(role=Role.ADMIN).quarantined == 1
        second = service.sweep(role=Role.ADMIN)
        assert second.quarantined == 0
        assert second.scanned == 0

    def test_sweep_does_not_touch_existing_quarantine(self, service, uow, make_item) -> None:
        item = make_item(poster=None, visibility=Quarantined(reason="Signalement"))
        service.sweep(role=Role.ADMIN)
        with uow:
            assert uow.catalogue.get_by_id(item.id).visibility.reason == "Signalement"

    def test_sweep_uses_configured_criteria(self, uow, make_item) -> None:
        make_item(poster=None)
        no_plot = make_item(title="No plot", plot=None)
        service = VisibilityService(uow, criteria=["missing_plot"])

        result = service.sweep(role=Role.ADMIN)

        assert result.reasons == {no_plot.id: "Missing plot"}

    def test_sweep_without_criteria(self, uow, make_item) -> None:
        make_item(poster=None)
        result = VisibilityService(uow, criteria=[]).sweep(role=Role.ADMIN)
        assert result.quarantined == 0

    def test_sweep_requires_admin(self, service) -> None:
        with pytest.raises(Unauthorized):
            service.sweep(role=Role.CONTRIBUTOR)


class TestManualQuarantine:
    """Tests de quarantine() et list_quarantined()."""

    def test_blank_reason_gets_default(self, service, make_item) -> None:
        item = make_item()
        hidden = service.quarantine(item.id, role=Role.ADMIN, reason="   ")
        assert hidden.visibility.reason == "Manually quarantined"

    def test_unknown_item(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.quarantine("404", role=Role.ADMIN)

    def test_list_quarantined(self, service, make_item) -> None:
        make_item(title="Zodiac")
        for title in ("Brazil", "Alien"):
            item = make_item(title=title)
            service.quarantine(item.id, role=Role.ADMIN, reason="Doublon")

        page = service.list_quarantined(role=Role.ADMIN, limit=1)

        assert page.total == 2
        assert page.showing == 1
        assert page.items[0].title == "Alien"
        assert page.items[0].reason == "Doublon"

    def test_list_quarantined_rejects_bad_pagination(self, service) -> None:
        with pytest.raises(ValidationError):
            service.list_quarantined(role=Role.ADMIN, limit=0)


class TestCorrectAndRestore:
    """Tests de correct_and_maybe_restore()."""

    def test_correct_and_restore(self, service, uow, make_item) -> None:
        item = make_item(poster=None)
        service.sweep(role=Role.ADMIN)

        restored = service.correct_and_maybe_restore(
            item.id, {"poster": "https://example.org/p.jpg"}, restore=True, role=Role.ADMIN
        )

        assert restored.visibility == Visible(updated_at=FIXED_NOW)
        assert restored.visibility.reason is None
        assert restored.poster == "https://example.org/p.jpg"
        assert item.id in [i.id for i in CatalogueService(uow).browse()]

    def test_correct_without_restore_keeps_quarantine(self, service, make_item) -> None:
        item = make_item(poster=None)
        service.quarantine(item.id, role=Role.ADMIN, reason="A verifier")

        corrected = service.correct_and_maybe_restore(
            item.id, {"plot": "Nouveau synopsis"}, restore=False, role=Role.ADMIN
        )

        assert corrected.plot == "Nouveau synopsis"
        assert corrected.visibility.reason == "A verifier"

    def test_correct_unknown_item(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.correct_and_maybe_restore("404", None, restore=True, role=Role.ADMIN)

    def test_invalid_patch(self, service, make_item) -> None:
        item = make_item()
        with pytest.raises(ValidationError):
            service.correct_and_maybe_restore(item.id, {"rating": 5}, restore=True, role=Role.ADMIN)
