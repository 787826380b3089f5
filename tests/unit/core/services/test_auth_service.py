"""
Registration, login, renames and account deletion.
"""

import pytest
from sqlalchemy import func, select

from labnote.core.errors import Conflict, InvalidCredentials
from labnote.core.models import Entry, EntryVersion, Project, Template, User, project_collaborators
from labnote.core.schemas.auth import LoginRequest, RegisterRequest, UserUpdateRequest
from labnote.core.schemas.entries import EntryCreate, EntryUpdate
from labnote.core.schemas.projects import ProjectCreate
from labnote.core.schemas.templates import TemplateCreate
from labnote.core.services import AuthService, EntryService, ProjectService, TemplateService


@pytest.fixture
def auth(test_session, token_service):
    return AuthService(test_session, token_service)


def _register(username="marie", email=None, password="radium-1898"):
    return RegisterRequest(
        username=username, email=email or f"{username}@example.org", password=password
    )


@pytest.mark.asyncio
async def test_register_signs_user_in(auth, token_service):
    token = await auth.register_user(_register())

    identity = token_service.verify(token.access_token)
    assert identity.user_id == token.user.id
    assert identity.claims["username"] == "marie"
    assert token.token_type == "bearer"
    assert token.expires_in == 24 * 3600


@pytest.mark.asyncio
async def test_register_rejects_duplicates(auth):
    await auth.register_user(_register())

    with pytest.raises(Conflict):
        await auth.register_user(_register(email="other@example.org"))
    with pytest.raises(Conflict):
        await auth.register_user(_register(username="pierre", email="marie@example.org"))


@pytest.mark.asyncio
async def test_login(auth):
    await auth.register_user(_register())

    token = await auth.authenticate_user(LoginRequest(username="marie", password="radium-1898"))
    assert token.user.username == "marie"

    with pytest.raises(InvalidCredentials):
        await auth.authenticate_user(LoginRequest(username="marie", password="wrong-password"))
    with pytest.raises(InvalidCredentials):
        await auth.authenticate_user(LoginRequest(username="nobody", password="radium-1898"))


@pytest.mark.asyncio
async def test_username_availability(auth):
    assert await auth.is_username_available("marie")
    await auth.register_user(_register())
    assert not await auth.is_username_available("marie")


@pytest.mark.asyncio
async def test_rename_issues_token_with_new_handle(auth, make_user, token_service):
    user = await make_user("marie")

    token = await auth.update_username(user, UserUpdateRequest(username="marie.curie"))

    assert token.user.username == "marie.curie"
    assert token_service.verify(token.access_token).claims["username"] == "marie.curie"


@pytest.mark.asyncio
async def test_rename_to_taken_handle(auth, make_user):
    user = await make_user("marie")
    await make_user("pierre")

    with pytest.raises(Conflict):
        await auth.update_username(user, UserUpdateRequest(username="pierre"))


@pytest.mark.asyncio
async def test_delete_account_cleans_up(test_session, auth, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    alice_id = alice.id
    projects = ProjectService(test_session)
    entries = EntryService(test_session)

    # alice owns P with bob inside; bob owns Q with alice inside
    p = await projects.create_project(alice, ProjectCreate(name="P"))
    await projects.add_collaborator(alice, p.id, "bob@example.org")
    q = await projects.create_project(bob, ProjectCreate(name="Q"))
    await projects.add_collaborator(bob, q.id, "alice@example.org")

    own = await entries.create_entry(alice, EntryCreate(title="alice loose"))
    await entries.update_entry(alice, own.id, EntryUpdate(title="alice loose 2"))
    bob_in_p = await entries.create_entry(bob, EntryCreate(title="bob in P", project_id=p.id))
    bob_in_q = await entries.create_entry(bob, EntryCreate(title="bob in Q", project_id=q.id))
    await entries.update_entry(alice, bob_in_q.id, EntryUpdate(content="edited by alice"))
    await TemplateService(test_session).create_template(alice, TemplateCreate(name="t"))

    await auth.delete_account(alice)

    async def scalar(stmt):
        return (await test_session.execute(stmt)).scalar_one()

    assert await scalar(select(func.count()).select_from(User).where(User.id == alice_id)) == 0
    assert await scalar(select(func.count()).select_from(Entry).where(Entry.author_id == alice_id)) == 0
    assert await scalar(select(func.count()).select_from(EntryVersion).where(EntryVersion.entry_id == own.id)) == 0
    assert await scalar(select(func.count()).select_from(Project).where(Project.owner_id == alice_id)) == 0
    assert await scalar(select(func.count()).select_from(Template).where(Template.owner_id == alice_id)) == 0
    assert await scalar(
        select(func.count()).select_from(project_collaborators).where(project_collaborators.c.user_id == alice_id)
    ) == 0

    assert await scalar(select(Entry.project_id).where(Entry.id == bob_in_p.id)) is None
    assert await scalar(select(Entry.project_id).where(Entry.id == bob_in_q.id)) == q.id
    assert await scalar(
        select(func.count()).select_from(EntryVersion).where(EntryVersion.modified_by_id == alice_id)
    ) == 0
    assert await scalar(
        select(func.count()).select_from(EntryVersion).where(EntryVersion.entry_id == bob_in_q.id)
    ) == 1
