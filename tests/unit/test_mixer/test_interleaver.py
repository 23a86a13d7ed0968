"""Unit tests for the bucket interleaver."""

from dataclasses import dataclass

import pytest

from src.data_model.items import FeedItemType
from src.mixer.interleaver import Interleaver
from src.mixer.metrics import MixerMetrics


@dataclass(frozen=True)
class _Stub:
    type: str
    id: str


def _bucket(item_type: FeedItemType, prefix: str, count: int) -> list[_Stub]:
    """Create ``count`` stub items of one type."""
    return [_Stub(item_type.value, f"{prefix}{i}") for i in range(count)]


def _make_buckets(
    threads: int = 10, news: int = 4, matches: int = 4
) -> dict[FeedItemType, list[_Stub]]:
    """Create thread, news and match buckets."""
    return {
        FeedItemType.THREAD: _bucket(FeedItemType.THREAD, "t", threads),
        FeedItemType.NEWS: _bucket(FeedItemType.NEWS, "n", news),
        FeedItemType.LOL_MATCH: _bucket(FeedItemType.LOL_MATCH, "m", matches),
    }


class TestInterleaver:
    """Tests for Interleaver.interleave."""

    def test_follows_slot_pattern(self) -> None:
        """Full buckets follow T T N T M."""
        out = Interleaver().interleave(_make_buckets(), limit=10)
        assert [i.id for i in out] == [
            "t0", "t1", "n0", "t2", "m0",
            "t3", "t4", "n1", "t5", "m1",
        ]  # fmt: skip

    def test_exhausted_slot_uses_fallback_order(self) -> None:
        """An empty slot type takes from the first non-empty bucket."""
        buckets = _make_buckets(threads=1, news=3, matches=3)
        out = Interleaver().interleave(buckets, limit=6)
        assert [i.id for i in out] == ["t0", "n0", "n1", "n2", "m0", "m1"]
        assert MixerMetrics.get_instance().fallback_pops == 3

    def test_stops_when_all_exhausted(self) -> None:
        """Output is shorter than the limit when buckets run dry."""
        buckets = _make_buckets(threads=1, news=1, matches=1)
        out = Interleaver().interleave(buckets, limit=10)
        assert sorted(i.id for i in out) == ["m0", "n0", "t0"]

    def test_respects_limit(self) -> None:
        """No more than ``limit`` items are emitted."""
        assert len(Interleaver().interleave(_make_buckets(), limit=3)) == 3
        assert Interleaver().interleave(_make_buckets(), limit=0) == []

    def test_buckets_not_mutated(self) -> None:
        """Input buckets keep their contents."""
        buckets = _make_buckets()
        snapshot = {k: list(v) for k, v in buckets.items()}
        Interleaver().interleave(buckets, limit=15)
        assert buckets == snapshot

    def test_each_item_emitted_once(self) -> None:
        """Every item appears at most once and order within a type is kept."""
        out = Interleaver().interleave(_make_buckets(), limit=18)
        ids = [i.id for i in out]
        assert len(ids) == len(set(ids)) == 18
        threads = [i for i in ids if i.startswith("t")]
        assert threads == [f"t{i}" for i in range(10)]

    def test_missing_bucket(self) -> None:
        """Absent buckets behave as empty."""
        buckets = {FeedItemType.NEWS: _bucket(FeedItemType.NEWS, "n", 2)}
        out = Interleaver().interleave(buckets, limit=5)
        assert [i.id for i in out] == ["n0", "n1"]

    def test_empty_pattern_rejected(self) -> None:
        """An empty slot pattern is a configuration error."""
        with pytest.raises(ValueError, match="pattern"):
            Interleaver(pattern=())
