"""
Tests unitaires pour PendingChangeLedger.

Verifie qu'une proposition n'ecrit jamais dans le catalogue, que les
contributeurs inactifs sont refuses et que l'instantane `previous` est pris.
"""

from dataclasses import replace

import pytest

from cineamore.core.entities import ChangeKind, ChangeStatus, Role, SessionClaims
from cineamore.core.errors import NotFoundError, Unauthorized, ValidationError
from cineamore.core.value_objects import UNSET
from cineamore.services.ledger import PendingChangeLedger


@pytest.fixture
def ledger(uow) -> PendingChangeLedger:
    return PendingChangeLedger(uow)


class TestPropose:
    """Tests de propose()."""

    def test_create_is_recorded_without_catalogue_write(
        self, ledger, uow, contributor_claims
    ) -> None:
        change = ledger.propose("create", None, {"title": "Brazil", "year": 1985}, contributor_claims)

        assert change.status is ChangeStatus.PENDING
        assert change.kind is ChangeKind.CREATE
        assert change.item_id is None
        assert change.previous is None
        assert change.contributor_username == "marie"
        with uow:
            assert uow.catalogue.list_visible() == []

    def test_create_requires_title(self, ledger, contributor_claims) -> None:
        with pytest.raises(ValidationError):
            ledger.propose("create", None, {"year": 1985}, contributor_claims)

    def test_update_keeps_snapshot(self, ledger, uow, make_item, contributor_claims) -> None:
        item = make_item()
        change = ledger.propose("update", item.id, {"year": 1980}, contributor_claims)

        assert change.item_id == item.id
        assert change.previous["year"] == 1979
        assert change.previous["genres"] == ["Horror", "Science Fiction"]
        assert change.proposed.fields() == {"year": 1980}
        with uow:
            assert uow.catalogue.get_by_id(item.id).year == 1979

    def test_update_unknown_item(self, ledger, contributor_claims) -> None:
        with pytest.raises(ValidationError):
            ledger.propose("update", "404", {"year": 1980}, contributor_claims)

    def test_empty_update_is_refused(self, ledger, make_item, contributor_claims) -> None:
        item = make_item()
        with pytest.raises(ValidationError):
            ledger.propose("update", item.id, {}, contributor_claims)

    def test_delete_keeps_summary_only(self, ledger, make_item, contributor_claims) -> None:
        item = make_item()
        change = ledger.propose("delete", item.id, {"plot": "ignored"}, contributor_claims)

        assert change.proposed.fields() == {
            "title": "Alien",
            "year": 1979,
            "director": "Ridley Scott",
        }
        assert change.proposed.plot is UNSET

    def test_unknown_kind(self, ledger, contributor_claims) -> None:
        with pytest.raises(ValidationError):
            ledger.propose("merge", None, {"title": "X"}, contributor_claims)

    @pytest.mark.parametrize(
        "claims",
        [
            None,
            SessionClaims.anonymous(),
            SessionClaims(role=Role.ADMIN, user="admin"),
            SessionClaims(role=Role.CONTRIBUTOR, user="ghost"),
        ],
    )
    def test_requires_contributor_session(self, ledger, claims) -> None:
        with pytest.raises(Unauthorized):
            ledger.propose("create", None, {"title": "Brazil"}, claims)

    def test_inactive_contributor_is_refused(
        self, ledger, uow, contributor, contributor_claims
    ) -> None:
        with uow:
            uow.contributors.save(replace(contributor, is_active=False))
        with pytest.raises(Unauthorized):
            ledger.propose("create", None, {"title": "Brazil"}, contributor_claims)

    def test_unknown_contributor_is_refused(self, ledger) -> None:
        claims = SessionClaims(role=Role.CONTRIBUTOR, user="ghost", contributor_id="999")
        with pytest.raises(Unauthorized):
            ledger.propose("create", None, {"title": "Brazil"}, claims)


class TestQueries:
    """Tests de consultation."""

    def test_list_pending_and_history(self, ledger, contributor, contributor_claims) -> None:
        first = ledger.propose("create", None, {"title": "Brazil"}, contributor_claims)
        second = ledger.propose("create", None, {"title": "Zodiac"}, contributor_claims)

        pending_ids = {c.id for c in ledger.list_pending()}
        history = ledger.list_for_contributor(contributor.id)

        assert pending_ids == {first.id, second.id}
        assert len(history) == 2
        assert ledger.list_pending(contributor_id="999") == []

    def test_get_unknown(self, ledger) -> None:
        with pytest.raises(NotFoundError):
            ledger.get("404")


class TestDiff:
    """Tests de diff()."""

    def test_update_diff_lists_changed_fields_only(
        self, ledger, make_item, contributor_claims
    ) -> None:
        item = make_item()
        change = ledger.propose(
            "update", item.id, {"title": "Alien", "year": 1980}, contributor_claims
        )

        diff = PendingChangeLedger.diff(change)

        assert [(d.field, d.before, d.after) for d in diff] == [("year", 1979, 1980)]

    def test_create_diff(self, ledger, contributor_claims) -> None:
        change = ledger.propose("create", None, {"title": "Brazil"}, contributor_claims)
        diff = PendingChangeLedger.diff(change)
        assert [(d.field, d.before, d.after) for d in diff] == [("title", None, "Brazil")]

    def test_delete_diff(self, ledger, make_item, contributor_claims) -> None:
        item = make_item()
        change = ledger.propose("delete", item.id, None, contributor_claims)
        diff = PendingChangeLedger.diff(change)
        assert {d.field for d in diff} == {"title", "year", "director"}
        assert all(d.after is None for d in diff)
