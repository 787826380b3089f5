import pytest
from pydantic import ValidationError

from labnote.core.schemas.auth import RegisterRequest, UserUpdateRequest
from labnote.core.schemas.common import PaginationResponse
from labnote.core.schemas.entries import EntryCreate, EntryUpdate


class TestEntrySchemas:
    def test_create_dedupes_tags(self):
        assert EntryCreate(title="t", tags=["a", " a", "b", ""]).tags == ["a", "b"]

    def test_create_requires_title(self):
        with pytest.raises(ValidationError):
            EntryCreate(title="")

    def test_update_distinguishes_null_from_missing_project(self):
        assert EntryUpdate.model_validate({"project_id": None}).moves_project
        assert not EntryUpdate.model_validate({"title": "x"}).moves_project


class TestAuthSchemas:
    def test_register_valid(self):
        req = RegisterRequest(username="marie.curie", email="marie@example.org", password="radium-1898")
        assert req.username == "marie.curie"

    @pytest.mark.parametrize("username", ["ab", "has space", "semi;colon", "x" * 51])
    def test_register_rejects_bad_usernames(self, username):
        with pytest.raises(ValidationError):
            RegisterRequest(username=username, email="marie@example.org", password="radium-1898")

    def test_register_rejects_bad_email_and_short_password(self):
        with pytest.raises(ValidationError):
            RegisterRequest(username="marie", email="not-an-email", password="radium-1898")
        with pytest.raises(ValidationError):
            RegisterRequest(username="marie", email="marie@example.org", password="short")

    def test_rename_uses_same_rules(self):
        with pytest.raises(ValidationError):
            UserUpdateRequest(username="bad name")


def test_pagination_math():
    page = PaginationResponse[int].create(items=[1, 2], total=5, page=3, per_page=2)

    assert page.pages == 3
    assert page.has_prev
    assert not page.has_next
