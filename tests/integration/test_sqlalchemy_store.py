"""Integration tests for the SQL-backed flag store against a sqlite file."""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from flag_admin import db as db_mod
from flag_admin.domain.flag import project_listing
from flag_admin.exceptions import FetchError, MutationError
from flag_admin.infrastructure.stores.sqlalchemy_store import SqlAlchemyFlagStore
from flag_admin.setup_db import create_all

FIELDS = [
    "Feature_Flag__c.Name",
    "Feature_Flag__c.Description__c",
    "Feature_Flag__c.Is_Active__c",
    "Feature_Flag__c.Percentage_Rollout__c",
]


@pytest.fixture
async def sql_store(database_url):
    engine = create_async_engine(database_url, echo=False)
    await create_all(engine=engine)
    session_factory = db_mod.create_sessionmaker(engine)
    try:
        yield SqlAlchemyFlagStore(session_factory)
    finally:
        await engine.dispose()


@pytest.fixture
def database_url(tmp_path):
    """Return a sqlite+aiosqlite URL backed by a per-test file in pytest's tmp_path."""
    db_file = tmp_path / "flags.db"
    return f"sqlite+aiosqlite:///{db_file.as_posix()}"


@pytest.mark.asyncio
async def test_create_and_list_sorted(sql_store):
    await sql_store.create("Feature_Flag__c", {"Name": "zeta", "Is_Active__c": True})
    await sql_store.create(
        "Feature_Flag__c",
        {"Name": "alpha", "Description__c": "first", "Percentage_Rollout__c": 20},
    )

    payload = await sql_store.fetch(
        "Feature_Flag__c", "All", FIELDS, ["Feature_Flag__c.Name"], 10
    )
    rows = project_listing(payload)

    assert [r.name for r in rows] == ["alpha", "zeta"]
    assert rows[0].description == "first"
    assert rows[0].percentage_rollout == 20
    assert rows[0].is_active is False
    assert rows[1].is_active is True
    assert all(r.id for r in rows)


@pytest.mark.asyncio
async def test_page_size_limits_results(sql_store):
    for i in range(12):
        await sql_store.create("Feature_Flag__c", {"Name": f"flag-{i:02d}"})

    payload = await sql_store.fetch(
        "Feature_Flag__c", "All", FIELDS, ["Feature_Flag__c.Name"], 10
    )

    assert len(payload["records"]) == 10


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(sql_store):
    created = await sql_store.create(
        "Feature_Flag__c", {"Name": "rollout", "Percentage_Rollout__c": 10}
    )

    updated = await sql_store.update(created["id"], {"Is_Active__c": True})

    assert updated["fields"]["Is_Active__c"]["value"] is True
    assert updated["fields"]["Percentage_Rollout__c"]["value"] == 10
    assert updated["fields"]["Name"]["value"] == "rollout"


@pytest.mark.asyncio
async def test_update_missing_record(sql_store):
    with pytest.raises(MutationError) as exc_info:
        await sql_store.update("999", {"Name": "ghost"})
    assert "does not exist" in exc_info.value.message


@pytest.mark.asyncio
async def test_update_non_numeric_id(sql_store):
    with pytest.raises(MutationError):
        await sql_store.update("abc", {"Name": "x"})


@pytest.mark.asyncio
async def test_unknown_column_and_missing_name(sql_store):
    with pytest.raises(MutationError):
        await sql_store.create("Feature_Flag__c", {"Name": "x", "Owner": "me"})
    with pytest.raises(MutationError):
        await sql_store.create("Feature_Flag__c", {"Description__c": "nameless"})


@pytest.mark.asyncio
async def test_fetch_unknown_collection(sql_store):
    with pytest.raises(FetchError):
        await sql_store.fetch("Other__c", "All", FIELDS, [], 10)
