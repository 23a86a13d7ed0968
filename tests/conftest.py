"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest
import structlog

from src.collectors.metrics import CollectorMetrics
from src.enrichment.metrics import EnrichmentMetrics
from src.feed.metrics import FeedMetrics
from src.mixer.metrics import MixerMetrics
from src.ranker.metrics import RankerMetrics


@pytest.fixture(autouse=True)
def _reset_singletons() -> Iterator[None]:
    """Reset metrics singletons and logging config around each test."""
    for metrics in (
        CollectorMetrics,
        EnrichmentMetrics,
        FeedMetrics,
        MixerMetrics,
        RankerMetrics,
    ):
        metrics.reset()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
