"""Constants for the engagement ranker."""

# Recency boost: RECENCY_BOOST_MAX * exp(-age_hours / RECENCY_DECAY_HOURS)
RECENCY_BOOST_MAX: float = 8.0
RECENCY_DECAY_HOURS: float = 72.0

# Weights applied to log10(1 + count)
VIEWS_WEIGHT: float = 1.0
VOTES_WEIGHT: float = 4.0  # votes outrank raw views
REPLIES_WEIGHT: float = 6.0  # replies are the strongest signal

SECONDS_PER_HOUR: int = 3600
