from typing import Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.db.models.staff import Staff


def _as_uuid(staff_id: Union[str, UUID]) -> Optional[UUID]:
    if isinstance(staff_id, UUID):
        return staff_id
    try:
        return UUID(str(staff_id))
    except ValueError:
        return None


async def get_staff(db: AsyncSession, staff_id: Union[str, UUID]) -> Optional[Staff]:
    """Returns the staff member, or None when the identifier resolves to nobody."""
    staff_uuid = _as_uuid(staff_id)
    if staff_uuid is None:
        return None
    result = await db.execute(select(Staff).where(Staff.id == staff_uuid))
    return result.scalars().first()


async def staff_exists(db: AsyncSession, staff_id: Union[str, UUID]) -> bool:
    """Existence check for operators and tests; the service uses get_staff for the row."""
    return await get_staff(db, staff_id) is not None
