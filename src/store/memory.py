"""In-memory feed store over plain row lists.

Serves as the reference adapter for the ``FeedDataSource`` contract: the
CLI renders pages from fixture files through it and the tests use it as
the collaborator double.
"""

import json
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
import yaml

from src.store.errors import FixtureLoadError
from src.store.protocols import Row, SourceQuery
from src.store.rows import parse_timestamp


logger = structlog.get_logger()

# Fixture top-level keys, in the order they are passed to the store.
FIXTURE_KEYS: tuple[str, ...] = (
    "threads",
    "news",
    "match_entries",
    "profiles",
    "matches",
    "participants",
)

_MATCH_SUMMARY_FIELDS: tuple[str, ...] = (
    "match_id",
    "game_creation",
    "game_duration",
    "queue_id",
    "data_version",
)


class InMemoryFeedStore:
    """``FeedDataSource`` backed by lists of dictionaries."""

    def __init__(  # noqa: PLR0913
        self,
        threads: Iterable[Row] | None = None,
        news: Iterable[Row] | None = None,
        match_entries: Iterable[Row] | None = None,
        profiles: Iterable[Row] | None = None,
        matches: Iterable[Row] | None = None,
        participants: Iterable[Row] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            threads: Forum thread rows.
            news: News rows.
            match_entries: Match-share activity rows.
            profiles: Profile rows.
            matches: Authoritative match records (with ``full_json``).
            participants: Per-player participant rows.
        """
        self._threads = list(threads or [])
        self._news = list(news or [])
        self._match_entries = list(match_entries or [])
        self._profiles = list(profiles or [])
        self._matches = list(matches or [])
        self._participants = list(participants or [])
        self._log = logger.bind(component="store", subcomponent="memory")

    def fetch_threads(self, query: SourceQuery) -> list[Row]:
        """Fetch non-deleted threads, newest first."""
        rows = [r for r in self._threads if r.get("deleted_at") is None]
        return self._range(rows, query, ("created_at",))

    def fetch_news(self, query: SourceQuery) -> list[Row]:
        """Fetch published news, newest publication first."""
        rows = [r for r in self._news if r.get("state") == "published"]
        return self._range(rows, query, ("published_at", "created_at"))

    def fetch_match_entries(self, query: SourceQuery) -> list[Row]:
        """Fetch public, non-deleted match shares, newest first."""
        rows = [
            r
            for r in self._match_entries
            if r.get("type") == "lol_match"
            and r.get("visibility") == "public"
            and r.get("deleted_at") is None
        ]
        return self._range(rows, query, ("created_at",))

    def fetch_profiles(self, user_ids: Sequence[str]) -> list[Row]:
        """Batch lookup of profiles by id."""
        wanted = set(user_ids)
        return [dict(p) for p in self._profiles if p.get("id") in wanted]

    def fetch_matches(self, match_ids: Sequence[str]) -> list[Row]:
        """Batch lookup of match records by match id."""
        wanted = set(match_ids)
        return [dict(m) for m in self._matches if m.get("match_id") in wanted]

    def fetch_participant_names(self, match_ids: Sequence[str]) -> list[Row]:
        """Batch lookup of stored participant names by match id."""
        wanted = set(match_ids)
        return [
            {
                "match_id": p.get("match_id"),
                "puuid": p.get("puuid"),
                "summoner_name": p.get("summoner_name"),
            }
            for p in self._participants
            if p.get("match_id") in wanted
        ]

    def fetch_participants(
        self, match_ids: Sequence[str], puuids: Sequence[str]
    ) -> list[Row]:
        """Batch lookup of participant rows, joined with their match summary."""
        wanted_matches = set(match_ids)
        wanted_puuids = set(puuids)
        summaries = {
            m.get("match_id"): {k: m.get(k) for k in _MATCH_SUMMARY_FIELDS}
            for m in self._matches
        }

        rows: list[Row] = []
        for p in self._participants:
            if p.get("match_id") not in wanted_matches:
                continue
            if p.get("puuid") not in wanted_puuids:
                continue
            row = dict(p)
            row["match"] = summaries.get(p.get("match_id"))
            rows.append(row)
        return rows

    def _range(
        self,
        rows: list[Row],
        query: SourceQuery,
        timestamp_fields: tuple[str, ...],
    ) -> list[Row]:
        """Apply watermark, look-back window, ordering and range.

        Args:
            rows: Pre-filtered rows.
            query: Range query.
            timestamp_fields: Fields tried in order for the row timestamp.

        Returns:
            Copies of the selected rows, newest first.
        """
        keyed: list[tuple[datetime, Row]] = []
        for row in rows:
            ts = self._row_timestamp(row, timestamp_fields)
            if ts is None:
                self._log.debug("row_without_timestamp", row_id=row.get("id"))
                continue
            if query.before is not None and ts >= query.before:
                continue
            if query.since is not None and ts < query.since:
                continue
            keyed.append((ts, row))

        keyed.sort(key=lambda pair: pair[0], reverse=True)
        window = keyed[query.offset : query.offset + query.limit]
        return [dict(row) for _, row in window]

    @staticmethod
    def _row_timestamp(
        row: Row, timestamp_fields: tuple[str, ...]
    ) -> datetime | None:
        for name in timestamp_fields:
            ts = parse_timestamp(row.get(name))
            if ts is not None:
                return ts
        return None


def load_fixture(path: Path) -> InMemoryFeedStore:
    """Load an in-memory store from a YAML or JSON fixture file.

    The file must hold a mapping whose keys are a subset of
    ``FIXTURE_KEYS``, each a list of row mappings.

    Args:
        path: Fixture file path.

    Returns:
        Populated store.

    Raises:
        FixtureLoadError: If the file is unreadable or malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FixtureLoadError(str(path), str(e)) from e

    try:
        if path.suffix.lower() == ".json":
            data: Any = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FixtureLoadError(str(path), f"parse error: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FixtureLoadError(str(path), "top level must be a mapping")

    unknown = sorted(set(data) - set(FIXTURE_KEYS))
    if unknown:
        raise FixtureLoadError(str(path), f"unknown keys: {', '.join(unknown)}")

    collections: dict[str, list[Row]] = {}
    for key in FIXTURE_KEYS:
        value = data.get(key) or []
        if not isinstance(value, list) or not all(
            isinstance(row, dict) for row in value
        ):
            raise FixtureLoadError(str(path), f"'{key}' must be a list of mappings")
        collections[key] = value

    logger.info(
        "fixture_loaded",
        component="store",
        path=str(path),
        **{f"{key}_count": len(rows) for key, rows in collections.items()},
    )
    return InMemoryFeedStore(**collections)
