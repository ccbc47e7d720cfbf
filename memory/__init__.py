"""Record sources and usage counters consumed by the insight pipeline."""

from memory.data_source import DataSource, InMemoryDataSource, JsonFileDataSource
from memory.usage_store import UsageStore, InMemoryUsageStore

__all__ = [
    "DataSource",
    "InMemoryDataSource",
    "JsonFileDataSource",
    "UsageStore",
    "InMemoryUsageStore",
]
