"""Tests for buyer accounts and extension officers."""

import pytest

from bayangida import errors
from bayangida.models.account import AccountStatus, ExtensionOfficer, OfficerStatus
from bayangida.services import OfficerRoster, UserDirectory
from bayangida.state.store import DocumentStore
from conftest import NOW, build_officer, build_user


# Users


@pytest.mark.asyncio
async def test_suspend_and_reactivate_user(users: UserDirectory, insert) -> None:
    await insert(build_user("U1"))

    suspended = await users.set_user_status("U1", "suspended")
    assert suspended.status == AccountStatus.SUSPENDED

    reactivated = await users.set_user_status("U1", AccountStatus.ACTIVE)
    assert reactivated.status == AccountStatus.ACTIVE
    assert reactivated.version == 2


@pytest.mark.asyncio
async def test_inactive_user_can_only_be_reactivated(users: UserDirectory, insert) -> None:
    await insert(build_user("U1", status=AccountStatus.INACTIVE))

    with pytest.raises(errors.IllegalTransition) as exc_info:
        await users.set_user_status("U1", "suspended")

    assert exc_info.value.subject == "user account"
    assert (await users.set_user_status("U1", "active")).status == AccountStatus.ACTIVE


@pytest.mark.asyncio
async def test_user_search_matches_phone_as_typed(users: UserDirectory, insert) -> None:
    await insert(build_user("U1", name="John Doe", phone="+2348031112222"))
    await insert(build_user("U2", name="Jane Smith", phone="+2348039998888"))

    assert [u.id for u in await users.list_users(search="1112")] == ["U1"]
    assert [u.id for u in await users.list_users(search="SMITH")] == ["U2"]


# Extension officers


@pytest.mark.asyncio
async def test_add_officer(officers: OfficerRoster) -> None:
    officer = await officers.add_officer(
        name="Halima Sani",
        email="halima@example.com",
        location="Kaduna State",
        specialization="Cereal crops",
    )

    stored = await officers.get_officer(officer.id)
    assert stored.status == OfficerStatus.ACTIVE
    assert stored.assigned_farmers == 0
    assert stored.active_listings == 0
    assert stored.last_active == NOW


@pytest.mark.asyncio
async def test_toggle_suspension(officers: OfficerRoster, insert) -> None:
    await insert(build_officer("E1"))

    suspended = await officers.toggle_suspension("E1")
    assert suspended.status == OfficerStatus.SUSPENDED
    assert suspended.last_active == NOW

    reactivated = await officers.toggle_suspension("E1")
    assert reactivated.status == OfficerStatus.ACTIVE


@pytest.mark.asyncio
async def test_remove_officer_clears_indexes(
    officers: OfficerRoster,
    store: DocumentStore,
    insert,
) -> None:
    await insert(build_officer("E1"))
    await insert(build_officer("E2"))

    await officers.remove_officer("E1")

    with pytest.raises(errors.NotFound):
        await officers.get_officer("E1")
    assert [o.id for o in await officers.list_officers(status="active")] == ["E2"]
    assert await store.count_documents(ExtensionOfficer) == 1


@pytest.mark.asyncio
async def test_remove_missing_officer(officers: OfficerRoster) -> None:
    with pytest.raises(errors.NotFound):
        await officers.remove_officer("missing")


@pytest.mark.asyncio
async def test_search_officers_by_specialization(officers: OfficerRoster, insert) -> None:
    await insert(build_officer("E1"))
    await insert(build_officer("E2", specialization="Livestock"))

    assert [o.id for o in await officers.list_officers(search="livestock")] == ["E2"]
