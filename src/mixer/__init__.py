"""Feed mixer: type interleaving and anti-repetition filtering."""

from src.mixer.anti_repetition import AntiRepetitionFilter, author_key
from src.mixer.constants import (
    FALLBACK_ORDER,
    INTERLEAVE_PATTERN,
    MAX_ITEMS_PER_AUTHOR,
    MAX_TYPE_RUN,
)
from src.mixer.interleaver import Interleaver
from src.mixer.metrics import MixerMetrics


__all__ = [
    "FALLBACK_ORDER",
    "INTERLEAVE_PATTERN",
    "MAX_ITEMS_PER_AUTHOR",
    "MAX_TYPE_RUN",
    "AntiRepetitionFilter",
    "Interleaver",
    "MixerMetrics",
    "author_key",
]
