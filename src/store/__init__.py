"""Read-only data access for the feed core.

This module provides:
- The ``FeedDataSource`` protocol the fetchers and lookups depend on
- ``SourceQuery`` range queries (offset, watermark, look-back window)
- An in-memory reference adapter loadable from fixture files
- Row normalization helpers for loosely typed store payloads
"""

from src.store.errors import FixtureLoadError, StoreError, StoreUnavailableError
from src.store.memory import FIXTURE_KEYS, InMemoryFeedStore, load_fixture
from src.store.protocols import FeedDataSource, Row, SourceQuery


__all__ = [
    "FIXTURE_KEYS",
    "FeedDataSource",
    "FixtureLoadError",
    "InMemoryFeedStore",
    "Row",
    "SourceQuery",
    "StoreError",
    "StoreUnavailableError",
    "load_fixture",
]
