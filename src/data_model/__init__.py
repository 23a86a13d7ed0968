"""Shared data models for feed items and wire serialization."""

from src.data_model.base import StrictBaseModel, WireModel
from src.data_model.items import (
    EnrichedMatchStats,
    FeedAuthor,
    FeedFilter,
    FeedItem,
    FeedItemType,
    LolMatchDetail,
    LolMatchEntry,
    LolMatchItem,
    NewsItem,
    NewsPayload,
    RosterPlayer,
    StatusItem,
    ThreadCategory,
    ThreadItem,
    ThreadPayload,
    WeaponStatsRecord,
)


__all__ = [
    "EnrichedMatchStats",
    "FeedAuthor",
    "FeedFilter",
    "FeedItem",
    "FeedItemType",
    "LolMatchDetail",
    "LolMatchEntry",
    "LolMatchItem",
    "NewsItem",
    "NewsPayload",
    "RosterPlayer",
    "StatusItem",
    "StrictBaseModel",
    "ThreadCategory",
    "ThreadItem",
    "ThreadPayload",
    "WeaponStatsRecord",
    "WireModel",
]
