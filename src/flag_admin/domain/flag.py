from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

# Field API names used on the wire (listing payloads, drafts, table rows)
ID_FIELD = "Id"
NAME_FIELD = "Name"
DESCRIPTION_FIELD = "Description__c"
IS_ACTIVE_FIELD = "Is_Active__c"
PERCENTAGE_ROLLOUT_FIELD = "Percentage_Rollout__c"

FLAG_FIELDS: List[str] = [
    NAME_FIELD,
    DESCRIPTION_FIELD,
    IS_ACTIVE_FIELD,
    PERCENTAGE_ROLLOUT_FIELD,
]

# record attribute -> wire field name
_ATTRIBUTE_FIELDS = {
    "name": NAME_FIELD,
    "description": DESCRIPTION_FIELD,
    "is_active": IS_ACTIVE_FIELD,
    "percentage_rollout": PERCENTAGE_ROLLOUT_FIELD,
}


@dataclass(frozen=True)
class GridColumn:
    label: str
    field_name: str
    type: str
    editable: bool = True


COLUMNS: List[GridColumn] = [
    GridColumn(label="Name", field_name=NAME_FIELD, type="text"),
    GridColumn(label="Description", field_name=DESCRIPTION_FIELD, type="text"),
    GridColumn(label="Is Active", field_name=IS_ACTIVE_FIELD, type="boolean"),
    GridColumn(label="Percentage Rollout", field_name=PERCENTAGE_ROLLOUT_FIELD, type="number"),
]


@dataclass
class FetchRequest:
    """Parameters of a single listing call: one page, one sort order."""

    collection: str = "Feature_Flag__c"
    list_view: str = "All"
    fields: List[str] = field(default_factory=lambda: list(FLAG_FIELDS))
    sort_by: List[str] = field(default_factory=lambda: [NAME_FIELD])
    page_size: int = 10

    def qualified_fields(self) -> List[str]:
        return [f"{self.collection}.{f}" for f in self.fields]

    def qualified_sort_by(self) -> List[str]:
        return [f"{self.collection}.{f}" for f in self.sort_by]


@dataclass
class FlagRecord:
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = False
    # expected 0-100, deliberately not range checked
    percentage_rollout: Optional[float] = None

    @property
    def is_persisted(self) -> bool:
        return bool(self.id)

    def to_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {ID_FIELD: self.id}
        for attr, wire in _ATTRIBUTE_FIELDS.items():
            row[wire] = getattr(self, attr)
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "FlagRecord":
        kwargs = {attr: row.get(wire) for attr, wire in _ATTRIBUTE_FIELDS.items()}
        return cls(id=row.get(ID_FIELD), **kwargs)


def _field_value(fields: Mapping[str, Any], name: str) -> Any:
    entry = fields.get(name)
    if isinstance(entry, Mapping):
        return entry.get("value")
    return None


def project_record(raw: Mapping[str, Any]) -> FlagRecord:
    """Flatten one listing item ``{"id", "fields": {name: {"value"}}}``.

    Fields absent from the payload come back as ``None``.
    """
    fields = raw.get("fields") or {}
    return FlagRecord(
        id=raw.get("id"),
        name=_field_value(fields, NAME_FIELD),
        description=_field_value(fields, DESCRIPTION_FIELD),
        is_active=_field_value(fields, IS_ACTIVE_FIELD),
        percentage_rollout=_field_value(fields, PERCENTAGE_ROLLOUT_FIELD),
    )


def project_listing(payload: Optional[Mapping[str, Any]]) -> List[FlagRecord]:
    if not payload:
        return []
    return [project_record(r) for r in (payload.get("records") or [])]


def to_listing_item(record_id: str, values: Mapping[str, Any]) -> Dict[str, Any]:
    """Build a listing-shaped item from plain field values (used by the stores)."""
    return {
        "id": record_id,
        "fields": {name: {"value": value} for name, value in values.items()},
    }


def unqualify(field_name: str) -> str:
    """``Feature_Flag__c.Name`` -> ``Name``."""
    return field_name.rsplit(".", 1)[-1]
