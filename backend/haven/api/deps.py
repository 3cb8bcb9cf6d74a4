from functools import lru_cache

from haven.core.config import settings
from haven.db.session import SessionLocal
from haven.services.history import HistoryAggregator
from haven.services.storage import DatabaseKeyValueStore, InMemoryKeyValueStore, KeyValueStore


@lru_cache(maxsize=1)
def get_key_value_store() -> KeyValueStore:
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    return DatabaseKeyValueStore(SessionLocal)


def get_history_aggregator() -> HistoryAggregator:
    return HistoryAggregator(
        store=get_key_value_store(),
        capacity=settings.history_capacity,
        storage_key=settings.history_storage_key,
    )
