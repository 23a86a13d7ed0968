"""Constants for the source fetchers."""

# Share of the page limit each source fetches for the mixed feed.
RECENT_THREADS_RATIO: float = 0.4
DISCOVER_THREADS_RATIO: float = 0.2
NEWS_RATIO: float = 0.2
MATCH_ENTRIES_RATIO: float = 0.2
