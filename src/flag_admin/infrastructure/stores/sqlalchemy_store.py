from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from ...domain.flag import (
    DESCRIPTION_FIELD,
    IS_ACTIVE_FIELD,
    NAME_FIELD,
    PERCENTAGE_ROLLOUT_FIELD,
    to_listing_item,
    unqualify,
)
from ...exceptions import FetchError, MutationError
from ...logging_config import get_logger
from ..db import models

logger = get_logger(__name__)

# wire field name -> model column
_COLUMNS = {
    NAME_FIELD: models.FeatureFlagModel.name,
    DESCRIPTION_FIELD: models.FeatureFlagModel.description,
    IS_ACTIVE_FIELD: models.FeatureFlagModel.is_active,
    PERCENTAGE_ROLLOUT_FIELD: models.FeatureFlagModel.percentage_rollout,
}


def _values(row: models.FeatureFlagModel, wanted: List[str]) -> Dict[str, Any]:
    return {f: getattr(row, _COLUMNS[f].key) for f in wanted}


class SqlAlchemyFlagStore:
    """Listing + mutation store backed by the ``feature_flags`` table.

    Each call opens its own session from ``session_factory`` so concurrent
    mutation calls from one batch never share a session.
    """

    def __init__(self, session_factory: Any, collection: str = "Feature_Flag__c"):
        self.session_factory = session_factory
        self.collection = collection

    def _column_values(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        values = {}
        for name, value in fields.items():
            column = _COLUMNS.get(name)
            if column is None:
                raise MutationError(f"No such column '{name}' on {self.collection}")
            values[column.key] = value
        return values

    async def fetch(
        self,
        collection: str,
        list_view: str,
        fields: List[str],
        sort_by: List[str],
        page_size: int,
    ) -> Dict[str, Any]:
        if collection != self.collection:
            raise FetchError(f"unknown collection: {collection}")
        wanted = [f for f in (unqualify(x) for x in fields) if f in _COLUMNS]
        order = [_COLUMNS[s] for s in (unqualify(x) for x in sort_by) if s in _COLUMNS]
        q = select(models.FeatureFlagModel).order_by(*order, models.FeatureFlagModel.id)
        q = q.limit(page_size)
        try:
            async with self.session_factory() as session:
                result = await session.execute(q)
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise FetchError("Failed to list feature flags.") from exc
        return {
            "records": [to_listing_item(str(r.id), _values(r, wanted)) for r in rows],
            "count": len(rows),
        }

    async def create(self, collection: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        if collection != self.collection:
            raise MutationError(f"unknown collection: {collection}")
        values = self._column_values(fields)
        if not values.get("name"):
            raise MutationError(f"Required fields are missing: [{NAME_FIELD}]")
        m = models.FeatureFlagModel(
            name=values["name"],
            description=values.get("description"),
            is_active=bool(values.get("is_active") or False),
            percentage_rollout=values.get("percentage_rollout"),
        )
        try:
            async with self.session_factory() as session:
                session.add(m)
                await session.flush()
                await session.commit()
        except SQLAlchemyError as exc:
            logger.debug("feature_flag_create_commit_failed", error=str(exc))
            raise MutationError("Failed to create feature flag.") from exc
        return to_listing_item(str(m.id), _values(m, list(_COLUMNS)))

    async def update(self, id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        try:
            pk = int(id)
        except (TypeError, ValueError):
            raise MutationError(f"invalid record id: {id}")
        values = self._column_values(fields)
        try:
            async with self.session_factory() as session:
                if values:
                    values["updated_at"] = datetime.utcnow()
                    await session.execute(
                        update(models.FeatureFlagModel)
                        .where(models.FeatureFlagModel.id == pk)
                        .values(**values)
                    )
                row = (
                    await session.execute(
                        select(models.FeatureFlagModel).where(models.FeatureFlagModel.id == pk)
                    )
                ).scalars().first()
                if row is None:
                    await session.rollback()
                    raise MutationError(f"The requested resource does not exist: {id}")
                await session.commit()
                return to_listing_item(str(row.id), _values(row, list(_COLUMNS)))
        except SQLAlchemyError as exc:
            logger.debug("feature_flag_update_commit_failed", flag_id=id, error=str(exc))
            raise MutationError("Failed to update feature flag.") from exc
