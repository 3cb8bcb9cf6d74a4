from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from haven.db import crud


class KeyValueStore(Protocol):
    """String-keyed document store; each write replaces the whole value."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


class DatabaseKeyValueStore:
    """Key-value store backed by the ``kv_entry`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as db:
            return await crud.get_value(db, key)

    async def set(self, key: str, value: str) -> None:
        async with self._session_factory() as db:
            await crud.set_value(db, key, value)

    async def remove(self, key: str) -> None:
        async with self._session_factory() as db:
            await crud.delete_value(db, key)
