"""
Tests unitaires pour ContributorService.
"""

import pytest

from cineamore.core.entities import Role
from cineamore.core.errors import NotFoundError, Unauthorized, ValidationError
from cineamore.services.contributors import ContributorService


@pytest.fixture
def service(uow) -> ContributorService:
    return ContributorService(uow)


class TestCreate:
    def test_create_normalises_username(self, service) -> None:
        created = service.create("@Paul ", "pass", Role.ADMIN, display_name=" Paul ")
        assert created.username == "paul"
        assert created.display_name == "Paul"
        assert created.is_active is True
        assert created.created_by == "admin"

    def test_duplicate_username(self, service, contributor) -> None:
        with pytest.raises(ValidationError, match="already exists"):
            service.create("MARIE", "pass", Role.ADMIN)

    @pytest.mark.parametrize("username,password", [("ab", "pass"), ("paul", "abc")])
    def test_short_values(self, service, username, password) -> None:
        with pytest.raises(ValidationError):
            service.create(username, password, Role.ADMIN)

    def test_requires_admin(self, service) -> None:
        with pytest.raises(Unauthorized):
            service.create("paul", "pass", Role.CONTRIBUTOR)


class TestUpdate:
    def test_short_password_is_ignored(self, service, contributor) -> None:
        updated = service.update(contributor.id, Role.ADMIN, password="abc", display_name="M.")
        assert updated.password == "secret"
        assert updated.display_name == "M."

    def test_deactivate_blocks_login(self, service, contributor) -> None:
        service.deactivate(contributor.id, Role.ADMIN)
        assert service.authenticate("marie", "secret") is None

    def test_unknown_contributor(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.update("404", Role.ADMIN, is_active=False)

    def test_list_all(self, service, contributor) -> None:
        assert [c.username for c in service.list_all(Role.ADMIN)] == ["marie"]


class TestAuthenticate:
    def test_valid_credentials(self, service, contributor) -> None:
        assert service.authenticate("@Marie", "secret").id == contributor.id

    @pytest.mark.parametrize("username,password", [("marie", "wrong"), ("ghost", "secret"), ("", "")])
    def test_invalid_credentials(self, service, contributor, username, password) -> None:
        assert service.authenticate(username, password) is None

    def test_mark_guide_seen(self, service, contributor) -> None:
        assert service.mark_guide_seen(contributor.id).has_seen_guide is True
        assert service.mark_guide_seen(contributor.id).has_seen_guide is True
