"""Constants for the feed orchestrator."""

SUMMARY_MAX_CHARS: int = 180
SUMMARY_ELLIPSIS: str = "..."

DEFAULT_CATEGORY_NAME: str = "Uncategorized"
DEFAULT_CATEGORY_SLUG: str = ""
DEFAULT_CATEGORY_COLOR: str = "#3b82f6"

# Mixed pages report more content when at least this many items are served
HAS_MORE_CEILING: int = 30

INTERNAL_ERROR_MESSAGE: str = "Internal server error"

# Stable news-id hash (djb2 variant over UTF-16 code units)
NEWS_HASH_SEED: int = 5381
NEWS_HASH_MULTIPLIER: int = 33
NEWS_HASH_MODULUS: int = 1_000_000_000
