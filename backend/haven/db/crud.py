from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from haven.db.models import KeyValueEntry


async def get_entry(db: AsyncSession, key: str) -> KeyValueEntry | None:
    stmt: Select[tuple[KeyValueEntry]] = select(KeyValueEntry).where(KeyValueEntry.key == key)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_value(db: AsyncSession, key: str) -> str | None:
    entry = await get_entry(db, key)
    if entry is None:
        return None
    return entry.value


async def set_value(db: AsyncSession, key: str, value: str) -> KeyValueEntry:
    # Whole-document overwrite; there is a single writer per key.
    entry = await get_entry(db, key)
    if entry is None:
        entry = KeyValueEntry(key=key, value=value)
        db.add(entry)
    else:
        entry.value = value
    await db.commit()
    await db.refresh(entry)
    return entry


async def delete_value(db: AsyncSession, key: str) -> bool:
    result = await db.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
    await db.commit()
    return bool(result.rowcount)
