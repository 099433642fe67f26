"""Tests for payout request handling."""

import asyncio
from datetime import timedelta

import pytest

from bayangida import errors
from bayangida.models.payout import PayoutStatus
from bayangida.services import PayoutDesk
from conftest import NOW, build_payout


@pytest.mark.asyncio
async def test_approve_then_process(payout_desk: PayoutDesk, insert) -> None:
    await insert(build_payout("PAY1"))

    approved = await payout_desk.update_payout_status("PAY1", "approved")
    assert approved.status == PayoutStatus.APPROVED
    assert approved.decided_at == NOW
    assert approved.processed_at is None

    processed = await payout_desk.update_payout_status("PAY1", "processed")
    assert processed.status == PayoutStatus.PROCESSED
    assert processed.processed_at == NOW
    assert processed.version == 2


@pytest.mark.asyncio
async def test_pending_payout_cannot_be_processed(payout_desk: PayoutDesk, insert) -> None:
    await insert(build_payout("PAY1"))

    with pytest.raises(errors.IllegalTransition) as exc_info:
        await payout_desk.update_payout_status("PAY1", "processed")

    assert exc_info.value.current == "pending"
    assert exc_info.value.requested == "processed"


@pytest.mark.asyncio
@pytest.mark.parametrize("target", ["approved", "processed", "pending"])
async def test_rejected_payout_is_final(payout_desk: PayoutDesk, insert, target: str) -> None:
    await insert(build_payout("PAY1", status=PayoutStatus.REJECTED))

    with pytest.raises(errors.IllegalTransition):
        await payout_desk.update_payout_status("PAY1", target)


@pytest.mark.asyncio
async def test_unknown_payout_status(payout_desk: PayoutDesk, insert) -> None:
    await insert(build_payout("PAY1"))

    with pytest.raises(errors.ValidationError):
        await payout_desk.update_payout_status("PAY1", "paid")


@pytest.mark.asyncio
async def test_concurrent_decisions_one_wins(payout_desk: PayoutDesk, insert) -> None:
    await insert(build_payout("PAY1"))

    results = await asyncio.gather(
        payout_desk.update_payout_status("PAY1", "approved"),
        payout_desk.update_payout_status("PAY1", "rejected"),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], (errors.ConcurrentUpdateConflict, errors.IllegalTransition))
    assert (await payout_desk.get_payout("PAY1")).version == 1


@pytest.mark.asyncio
async def test_open_queue_lists_pending_and_approved(payout_desk: PayoutDesk, insert) -> None:
    await insert(build_payout("PAY1", created_at=NOW - timedelta(days=2)))
    await insert(build_payout("PAY2", status=PayoutStatus.APPROVED, created_at=NOW - timedelta(days=1)))
    await insert(build_payout("PAY3", status=PayoutStatus.PROCESSED))

    assert [p.id for p in await payout_desk.list_open_payouts()] == ["PAY2", "PAY1"]
    assert [p.id for p in await payout_desk.list_payouts()] == ["PAY3", "PAY2", "PAY1"]


@pytest.mark.asyncio
async def test_search_payouts_by_bank(payout_desk: PayoutDesk, insert) -> None:
    await insert(build_payout("PAY1"))
    await insert(
        build_payout(
            "PAY2",
            requester_name="Musa Ibrahim",
            reason="Delivery earnings",
            bank={"bank_name": "GTBank", "account_number": "0123456789", "account_name": "Musa Ibrahim"},
        )
    )

    assert [p.id for p in await payout_desk.list_payouts(search="gtb")] == ["PAY2"]
    assert [p.id for p in await payout_desk.list_payouts(search="rice")] == ["PAY1"]
