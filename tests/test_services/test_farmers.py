"""Tests for farmer registration review."""

from datetime import timedelta

import pytest

from bayangida import errors
from bayangida.models.driver import ApplicationStatus, VerificationStatus
from bayangida.models.farmer import Farmer
from bayangida.services import FarmerRegistry
from bayangida.state.store import DocumentStore
from conftest import NOW, build_farmer


@pytest.mark.asyncio
async def test_approve_registration_verifies_farmer(farmers: FarmerRegistry, insert) -> None:
    await insert(build_farmer("F1"))

    farmer = await farmers.decide_registration("F1", "approved")

    assert farmer.status == ApplicationStatus.APPROVED
    assert farmer.verification_status == VerificationStatus.VERIFIED
    assert farmer.version == 1


@pytest.mark.asyncio
async def test_reject_registration(farmers: FarmerRegistry, insert) -> None:
    await insert(build_farmer("F1"))

    farmer = await farmers.decide_registration("F1", ApplicationStatus.REJECTED)

    assert farmer.verification_status == VerificationStatus.REJECTED


@pytest.mark.asyncio
async def test_decided_registration_is_final(farmers: FarmerRegistry, insert) -> None:
    await insert(build_farmer("F1", status=ApplicationStatus.APPROVED))

    with pytest.raises(errors.IllegalTransition) as exc_info:
        await farmers.decide_registration("F1", "rejected")

    assert exc_info.value.subject == "farmer registration"


@pytest.mark.asyncio
@pytest.mark.parametrize("decision", ["pending", "maybe"])
async def test_invalid_registration_decision(
    farmers: FarmerRegistry,
    insert,
    decision: str,
) -> None:
    await insert(build_farmer("F1"))

    with pytest.raises(errors.ValidationError):
        await farmers.decide_registration("F1", decision)


@pytest.mark.asyncio
async def test_status_tabs_follow_decisions(
    farmers: FarmerRegistry,
    store: DocumentStore,
    insert,
) -> None:
    await insert(build_farmer("F1"))
    await insert(build_farmer("F2"))

    await farmers.decide_registration("F1", "approved")

    assert [f.id for f in await farmers.list_farmers(status="pending")] == ["F2"]
    assert [f.id for f in await farmers.list_farmers(status="approved")] == ["F1"]
    assert await store.count_documents(Farmer, ApplicationStatus.PENDING) == 1


@pytest.mark.asyncio
async def test_search_farmers(farmers: FarmerRegistry, insert) -> None:
    await insert(build_farmer("F1", name="Aminu Hassan", created_at=NOW - timedelta(days=2)))
    await insert(build_farmer("F2", name="Ibrahim Musa", farm_location="Sokoto State"))

    assert [f.id for f in await farmers.list_farmers()] == ["F2", "F1"]
    assert [f.id for f in await farmers.list_farmers(search="AMINU")] == ["F1"]
    assert [f.id for f in await farmers.list_farmers(search="sokoto")] == ["F2"]


@pytest.mark.asyncio
async def test_unknown_status_tab(farmers: FarmerRegistry) -> None:
    with pytest.raises(errors.ValidationError):
        await farmers.list_farmers(status="asleep")


@pytest.mark.asyncio
async def test_decide_missing_farmer(farmers: FarmerRegistry) -> None:
    with pytest.raises(errors.NotFound):
        await farmers.decide_registration("missing", "approved")
