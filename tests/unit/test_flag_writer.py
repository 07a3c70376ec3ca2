"""Unit tests for FlagWriter batch saves."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from flag_admin.domain.notification import Severity
from flag_admin.domain.save import MutationKind
from flag_admin.exceptions import MutationError
from flag_admin.services.flag_writer import ERROR_TITLE, FlagWriter, partition


def test_partition_routes_by_truthy_id():
    updates, creates = partition(
        [{"Id": "1", "Name": "a"}, {"Name": "b"}, {"Id": "", "Name": "c"}, {"Id": None}]
    )
    assert [u["Id"] for u in updates] == ["1"]
    assert len(creates) == 3


@pytest.mark.asyncio
async def test_two_updates_and_one_create(writer, mock_mutations):
    drafts = [
        {"Id": "1", "Is_Active__c": True},
        {"Id": "2", "Percentage_Rollout__c": 75},
        {"Name": "brand-new", "Is_Active__c": False},
    ]

    outcome = await writer.save(drafts)

    assert outcome.ok is True
    assert mock_mutations.update.await_count == 2
    assert mock_mutations.create.await_count == 1
    mock_mutations.update.assert_any_await("1", {"Is_Active__c": True})
    mock_mutations.update.assert_any_await("2", {"Percentage_Rollout__c": 75})
    mock_mutations.create.assert_awaited_once_with(
        "Feature_Flag__c", {"Name": "brand-new", "Is_Active__c": False}
    )
    assert outcome.updated == 2
    assert outcome.created == 1


@pytest.mark.asyncio
async def test_success_notifies_once(writer, sink):
    await writer.save([{"Id": "1", "Name": "x"}])

    assert len(sink.history) == 1
    note = sink.history[0]
    assert note.title == "Success"
    assert note.message == "Feature Flags updated"
    assert note.severity is Severity.SUCCESS


@pytest.mark.asyncio
async def test_failure_reports_first_rejection_body_message(writer, mock_mutations, sink):
    mock_mutations.update = AsyncMock(
        side_effect=MutationError("HTTP 400", body={"message": "Value out of range"})
    )

    outcome = await writer.save([{"Id": "1", "Percentage_Rollout__c": 250}, {"Name": "ok"}])

    assert outcome.ok is False
    assert outcome.message == "Value out of range"
    assert len(sink.history) == 1
    note = sink.history[0]
    assert note.title == ERROR_TITLE
    assert note.message == "Value out of range"
    assert note.severity is Severity.ERROR


@pytest.mark.asyncio
async def test_first_failure_is_by_completion_order(mock_mutations, sink):
    async def slow_update(id, fields):
        await asyncio.sleep(0.05)
        raise MutationError("slow failure")

    async def fast_create(collection, fields):
        await asyncio.sleep(0)
        raise MutationError("fast failure")

    mock_mutations.update = AsyncMock(side_effect=slow_update)
    mock_mutations.create = AsyncMock(side_effect=fast_create)
    writer = FlagWriter(mock_mutations, sink)

    outcome = await writer.save([{"Id": "1", "Name": "a"}, {"Name": "b"}])

    assert outcome.message == "fast failure"
    # rows stay in draft order
    assert [r.operation for r in outcome.rows] == [MutationKind.UPDATE, MutationKind.CREATE]
    assert [r.error for r in outcome.rows] == ["slow failure", "fast failure"]


@pytest.mark.asyncio
async def test_calls_run_concurrently_and_all_settle(mock_mutations, sink):
    started = []
    finished = []

    async def update(id, fields):
        started.append(id)
        await asyncio.sleep(0.01)
        finished.append(id)
        if id == "2":
            raise MutationError("nope")
        return {"id": id}

    mock_mutations.update = AsyncMock(side_effect=update)
    writer = FlagWriter(mock_mutations, sink)

    outcome = await writer.save([{"Id": "1"}, {"Id": "2"}, {"Id": "3"}])

    assert sorted(started) == ["1", "2", "3"]
    # the failing call does not short-circuit the others
    assert sorted(finished) == ["1", "2", "3"]
    assert [r.ok for r in outcome.rows] == [True, False, True]
    assert len(outcome.failed) == 1


@pytest.mark.asyncio
async def test_plain_exception_message_is_used(writer, mock_mutations):
    mock_mutations.create = AsyncMock(side_effect=RuntimeError("socket closed"))

    outcome = await writer.save([{"Name": "x"}])

    assert outcome.message == "socket closed"


@pytest.mark.asyncio
async def test_empty_batch_is_vacuous_success(writer, mock_mutations, sink):
    outcome = await writer.save([])

    assert outcome.ok is True
    assert outcome.rows == []
    mock_mutations.update.assert_not_called()
    mock_mutations.create.assert_not_called()
    assert [n.severity for n in sink.history] == [Severity.SUCCESS]


@pytest.mark.asyncio
async def test_drafts_are_not_mutated(writer):
    drafts = [{"Id": "1", "Name": "a"}]

    await writer.save(drafts)

    assert drafts == [{"Id": "1", "Name": "a"}]


@pytest.mark.asyncio
async def test_same_tick_rejections_report_the_earliest_draft(mock_mutations, sink):
    mock_mutations.update = AsyncMock(side_effect=MutationError("first-row"))
    mock_mutations.create = AsyncMock(side_effect=MutationError("second-row"))
    writer = FlagWriter(mock_mutations, sink)

    messages = set()
    for _ in range(50):
        outcome = await writer.save([{"Id": "1", "Name": "a"}, {"Name": "b"}])
        messages.add(outcome.message)

    assert messages == {"first-row"}
    assert {n.title for n in sink.recent()} == {ERROR_TITLE}
