"""
Resolving principals and upserting federated users.
"""

import uuid

import pytest

from labnote.core.errors import Conflict, NotFound
from labnote.core.services import IdentityService
from labnote.security.password import verify_password


@pytest.fixture
def identity(test_session):
    return IdentityService(test_session)


@pytest.mark.asyncio
async def test_resolve_by_id_and_handle(identity, make_user):
    user = await make_user("marie")

    assert (await identity.resolve_by_id(user.id)).username == "marie"
    assert await identity.resolve_by_id(uuid.uuid4()) is None
    assert (await identity.resolve_by_handle("marie")).id == user.id
    with pytest.raises(NotFound):
        await identity.resolve_by_handle("nobody")


@pytest.mark.asyncio
async def test_first_federated_login_creates_user(identity):
    user = await identity.resolve_or_create_federated(
        "google", "marie@example.org", {"picture": "https://img/m.png"}
    )

    assert user.username == "marie@example.org"
    assert user.email == "marie@example.org"
    assert user.provider == "google"
    assert user.picture == "https://img/m.png"
    # the account has a password nobody knows
    assert not verify_password("", user.password_hash)


@pytest.mark.asyncio
async def test_second_login_refreshes_existing_user(identity, make_user):
    existing = await make_user("marie", email="marie@example.org")

    user = await identity.resolve_or_create_federated(
        "github", "marie@example.org", {"picture": "https://avatars/9"}
    )

    assert user.id == existing.id
    assert user.username == "marie"
    assert user.provider == "github"
    assert user.picture == "https://avatars/9"


@pytest.mark.asyncio
async def test_handle_collision_gets_suffix(identity, make_user):
    await make_user("marie@example.org", email="someone-else@example.org")

    user = await identity.resolve_or_create_federated("google", "marie@example.org")

    assert user.username.startswith("marie@example.org-")
    assert user.email == "marie@example.org"


@pytest.mark.asyncio
async def test_lost_creation_race_resolves_to_winner(identity, make_user):
    winner = await make_user("marie", email="marie@example.org")
    winner_id = winner.id
    real_lookup = identity.user_repo.get_by_email
    calls = []

    async def racing_lookup(email):
        calls.append(email)
        # the first lookup runs before the concurrent insert lands
        if len(calls) == 1:
            return None
        return await real_lookup(email)

    identity.user_repo.get_by_email = racing_lookup

    user = await identity.resolve_or_create_federated("google", "marie@example.org")

    assert user.id == winner_id
    assert user.provider == "google"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_email_match_ignores_case(identity, make_user):
    existing = await make_user("marie", email="marie@lab.org")

    user = await identity.resolve_or_create_federated("google", "Marie@Lab.org")

    assert user.id == existing.id
    assert user.email == "marie@lab.org"


@pytest.mark.asyncio
async def test_new_federated_email_is_stored_lower_case(identity):
    user = await identity.resolve_or_create_federated("github", "  Pierre@Lab.ORG ")

    assert user.email == "pierre@lab.org"
    assert user.username == "pierre@lab.org"


@pytest.mark.asyncio
async def test_lost_handle_race_retries_with_suffix(identity, make_user):
    # a local account grabs the handle between the check and the insert
    await make_user("nina@lab.org", email="nina.local@lab.org")
    real_check = identity.user_repo.is_username_taken
    checks = []

    async def stale_check(username):
        checks.append(username)
        if len(checks) == 1:
            return False
        return await real_check(username)

    identity.user_repo.is_username_taken = stale_check

    user = await identity.resolve_or_create_federated("google", "nina@lab.org")

    assert user.email == "nina@lab.org"
    assert user.username.startswith("nina@lab.org-")
    assert len(checks) == 2


@pytest.mark.asyncio
async def test_repeated_handle_clash_gives_up(identity, make_user):
    await make_user("olga@lab.org", email="olga.local@lab.org")

    async def always_free(username):
        return False

    identity.user_repo.is_username_taken = always_free

    with pytest.raises(Conflict):
        await identity.resolve_or_create_federated("google", "olga@lab.org")
