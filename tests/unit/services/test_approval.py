"""
Tests unitaires pour ApprovalWorkflow.

Ces tests verifient:
- Les transitions pending -> approved | rejected, terminales
- L'ecriture exacte des champs proposes (update)
- L'atomicite : un echec du catalogue laisse la proposition pending
- Les decisions en masse, independantes les unes des autres
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from cineamore.core.entities import ChangeStatus, Role, Visible
from cineamore.core.errors import (
    InvalidStateError,
    NotFoundError,
    StoreError,
    Unauthorized,
)
from cineamore.infrastructure.persistence.repositories import (
    SQLModelCatalogueRepository,
    SQLModelPendingChangeRepository,
)
from cineamore.services.approval import ApprovalWorkflow
from cineamore.services.ledger import PendingChangeLedger

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def ledger(uow) -> PendingChangeLedger:
    return PendingChangeLedger(uow)


@pytest.fixture
def workflow(uow) -> ApprovalWorkflow:
    return ApprovalWorkflow(uow, clock=lambda: FIXED_NOW)


class TestApprove:
    """Tests de approve()."""

    def test_approve_create_inserts_visible_item(
        self, workflow, ledger, uow, contributor_claims
    ) -> None:
        change = ledger.propose(
            "create", None, {"title": "Brazil", "year": 1985, "genres": ["Comedy"]}, contributor_claims
        )

        reviewed = workflow.approve(change.id, reviewer="admin", role=Role.ADMIN)

        assert reviewed.status is ChangeStatus.APPROVED
        assert reviewed.reviewed_by == "admin"
        assert reviewed.reviewed_at == FIXED_NOW
        with uow:
            items = uow.catalogue.list_visible()
        assert [i.title for i in items] == ["Brazil"]
        assert isinstance(items[0].visibility, Visible)
        assert items[0].genres == ("Comedy",)

    def test_approve_update_writes_only_present_fields(
        self, workflow, ledger, uow, make_item, contributor_claims
    ) -> None:
        item = make_item()
        change = ledger.propose(
            "update", item.id, {"plot": None, "year": 1980}, contributor_claims
        )

        workflow.approve(change.id, reviewer="admin", role=Role.ADMIN)

        with uow:
            updated = uow.catalogue.get_by_id(item.id)
        assert updated.year == 1980
        assert updated.plot is None
        assert updated.title == "Alien"
        assert updated.director == "Ridley Scott"
        assert updated.genres == ("Horror", "Science Fiction")

    def test_approve_delete_removes_item(
        self, workflow, ledger, uow, make_item, contributor_claims
    ) -> None:
        item = make_item()
        change = ledger.propose("delete", item.id, None, contributor_claims)

        workflow.approve(change.id, reviewer="admin", role=Role.ADMIN)

        with uow:
            assert uow.catalogue.get_by_id(item.id) is None

    def test_second_decision_is_refused(self, workflow, ledger, contributor_claims) -> None:
        change = ledger.propose("create", None, {"title": "Brazil"}, contributor_claims)
        workflow.approve(change.id, reviewer="admin", role=Role.ADMIN)

        with pytest.raises(InvalidStateError):
            workflow.approve(change.id, reviewer="admin", role=Role.ADMIN)
        with pytest.raises(InvalidStateError):
            workflow.reject(change.id, reviewer="admin", role=Role.ADMIN)

    def test_missing_target_keeps_change_pending(
        self, workflow, ledger, uow, make_item, contributor_claims
    ) -> None:
        item = make_item()
        change = ledger.propose("update", item.id, {"year": 1980}, contributor_claims)
        with uow:
            uow.catalogue.delete(item.id)

        with pytest.raises(NotFoundError):
            workflow.approve(change.id, reviewer="admin", role=Role.ADMIN)
        assert ledger.get(change.id).status is ChangeStatus.PENDING

    def test_catalogue_failure_keeps_change_pending(
        self, workflow, ledger, uow, make_item, contributor_claims, monkeypatch
    ) -> None:
        item = make_item()
        change = ledger.propose("update", item.id, {"year": 1980}, contributor_claims)

        def failing_save(self, entity):
            raise OperationalError("UPDATE", {}, Exception("database is locked"))

        monkeypatch.setattr(SQLModelCatalogueRepository, "save", failing_save)

        with pytest.raises(StoreError):
            workflow.approve(change.id, reviewer="admin", role=Role.ADMIN)
        assert ledger.get(change.id).status is ChangeStatus.PENDING
        with uow:
            assert uow.catalogue.get_by_id(item.id).year == 1979

    def test_concurrent_review_rolls_back_catalogue_write(
        self, workflow, ledger, uow, contributor_claims, monkeypatch
    ) -> None:
        change = ledger.propose("create", None, {"title": "Brazil"}, contributor_claims)
        monkeypatch.setattr(
            SQLModelPendingChangeRepository, "mark_reviewed", lambda self, *args: False
        )

        with pytest.raises(InvalidStateError):
            workflow.approve(change.id, reviewer="admin", role=Role.ADMIN)
        with uow:
            assert uow.catalogue.list_visible() == []

    def test_unknown_change(self, workflow) -> None:
        with pytest.raises(NotFoundError):
            workflow.approve("404", reviewer="admin", role=Role.ADMIN)

    @pytest.mark.parametrize("role", [Role.CONTRIBUTOR, Role.NONE, None, "contributor"])
    def test_requires_admin(self, workflow, ledger, contributor_claims, role) -> None:
        change = ledger.propose("create", None, {"title": "Brazil"}, contributor_claims)
        with pytest.raises(Unauthorized):
            workflow.approve(change.id, reviewer="marie", role=role)
        assert ledger.get(change.id).status is ChangeStatus.PENDING


class TestReject:
    """Tests de reject()."""

    def test_reject_leaves_catalogue_untouched(
        self, workflow, ledger, uow, make_item, contributor_claims
    ) -> None:
        item = make_item()
        change = ledger.propose("update", item.id, {"year": 1980}, contributor_claims)

        reviewed = workflow.reject(change.id, reviewer="admin", role=Role.ADMIN, note=" Doublon ")

        assert reviewed.status is ChangeStatus.REJECTED
        assert reviewed.review_notes == "Doublon"
        with uow:
            assert uow.catalogue.get_by_id(item.id).year == 1979

    def test_blank_note_is_dropped(self, workflow, ledger, contributor_claims) -> None:
        change = ledger.propose("create", None, {"title": "Brazil"}, contributor_claims)
        reviewed = workflow.reject(change.id, reviewer="admin", role="admin", note="  ")
        assert reviewed.review_notes is None


class TestBulk:
    """Tests des decisions en masse."""

    def test_bulk_approve_continues_after_failure(
        self, workflow, ledger, uow, contributor_claims
    ) -> None:
        first = ledger.propose("create", None, {"title": "Brazil"}, contributor_claims)
        second = ledger.propose("create", None, {"title": "Zodiac"}, contributor_claims)
        workflow.reject(second.id, reviewer="admin", role=Role.ADMIN)

        result = workflow.bulk_approve([first.id, second.id, "404"], "admin", Role.ADMIN)

        assert result.succeeded == 1
        assert [pid for pid, _ in result.errors] == [second.id, "404"]
        with uow:
            assert [i.title for i in uow.catalogue.list_visible()] == ["Brazil"]

    def test_bulk_reject_applies_note(self, workflow, ledger, contributor_claims) -> None:
        ids = [
            ledger.propose("create", None, {"title": t}, contributor_claims).id
            for t in ("Brazil", "Zodiac")
        ]

        result = workflow.bulk_reject(ids, "admin", Role.ADMIN, note="Hors sujet")

        assert result.succeeded == 2
        assert result.errors == []
        assert {ledger.get(i).review_notes for i in ids} == {"Hors sujet"}

    def test_bulk_requires_admin(self, workflow) -> None:
        with pytest.raises(Unauthorized):
            workflow.bulk_approve(["1"], "marie", Role.CONTRIBUTOR)
