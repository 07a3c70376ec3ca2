from flag_admin.domain.flag import (
    COLUMNS,
    FetchRequest,
    FlagRecord,
    project_listing,
    project_record,
    unqualify,
)


def test_project_record_extracts_values(listing_item):
    raw = listing_item("1", "A", "desc", True, 25)
    rec = project_record(raw)
    assert rec == FlagRecord(
        id="1", name="A", description="desc", is_active=True, percentage_rollout=25
    )


def test_row_uses_field_api_names(listing_item):
    row = project_record(listing_item("1", "A", None, True, 10)).to_row()
    assert row == {
        "Id": "1",
        "Name": "A",
        "Description__c": None,
        "Is_Active__c": True,
        "Percentage_Rollout__c": 10,
    }


def test_missing_fields_yield_none():
    rec = project_record({"id": "7", "fields": {"Name": {"value": "only-name"}}})
    assert rec.id == "7"
    assert rec.name == "only-name"
    assert rec.description is None
    assert rec.is_active is None
    assert rec.percentage_rollout is None


def test_missing_fields_mapping_is_not_an_error():
    rec = project_record({"id": "8"})
    assert rec.id == "8"
    assert rec.name is None


def test_project_listing_preserves_count_and_order(listing_item):
    payload = {"records": [listing_item(str(i), f"flag-{i}") for i in range(5)]}
    rows = project_listing(payload)
    assert len(rows) == 5
    assert [r.name for r in rows] == [f"flag-{i}" for i in range(5)]


def test_project_listing_empty_payloads():
    assert project_listing(None) == []
    assert project_listing({}) == []
    assert project_listing({"records": []}) == []


def test_from_row_round_trip_keeps_missing_id():
    rec = FlagRecord.from_row({"Name": "draft-only", "Is_Active__c": True})
    assert rec.id is None
    assert rec.is_persisted is False
    assert rec.is_active is True


def test_fetch_request_qualifies_fields():
    req = FetchRequest(collection="Feature_Flag__c", fields=["Name"], sort_by=["Name"])
    assert req.qualified_fields() == ["Feature_Flag__c.Name"]
    assert req.qualified_sort_by() == ["Feature_Flag__c.Name"]
    assert unqualify("Feature_Flag__c.Name") == "Name"
    assert unqualify("Name") == "Name"


def test_columns_are_all_editable():
    assert [c.field_name for c in COLUMNS] == [
        "Name",
        "Description__c",
        "Is_Active__c",
        "Percentage_Rollout__c",
    ]
    assert all(c.editable for c in COLUMNS)
