from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.db.models.daily_sale import ACCUMULATED_FIELDS, DailySale

# Dialects whose INSERT supports ON CONFLICT ... DO UPDATE with RETURNING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(db: AsyncSession):
    dialect_name = db.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect_name]
    except KeyError:
        raise RuntimeError(f"Atomic upsert is not supported for dialect '{dialect_name}'")


async def upsert_daily_sale(
    db: AsyncSession,
    staff_id: UUID,
    day: datetime,
    deltas: Dict[str, Any]
) -> DailySale:
    """Adds ``deltas`` to the (staff_id, day) record, creating it if absent.

    Runs as one INSERT ... ON CONFLICT DO UPDATE statement so concurrent
    submissions for the same bucket never overwrite each other. Fields not in
    ``deltas`` start from their column default (0) on insert and are left
    untouched on update. The caller owns the transaction.
    """
    unknown = set(deltas) - set(ACCUMULATED_FIELDS)
    if unknown:
        raise ValueError(f"Not accumulated fields: {sorted(unknown)}")

    insert = _insert_for(db)
    stmt = insert(DailySale).values(staff_id=staff_id, date=day, **deltas)
    increments = {
        name: getattr(DailySale, name) + getattr(stmt.excluded, name)
        for name in deltas
    }
    increments["updated_at"] = func.now()
    stmt = stmt.on_conflict_do_update(
        index_elements=[DailySale.staff_id, DailySale.date],
        set_=increments
    ).returning(DailySale)

    result = await db.execute(stmt, execution_options={"populate_existing": True})
    return result.scalars().one()


async def get_daily_sale(db: AsyncSession, staff_id: UUID, day: datetime) -> Optional[DailySale]:
    """Read helper for operators and tests. Writes go through upsert_daily_sale only."""
    result = await db.execute(
        select(DailySale).where(DailySale.staff_id == staff_id, DailySale.date == day)
    )
    return result.scalars().first()
