"""Unit tests for the feed CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from src.cli.feed import cli
from src.cursor.codec import encode_cursor
from src.cursor.models import FeedCursor


FIXTURE = Path(__file__).resolve().parents[2] / "fixtures" / "feed.yaml"


@pytest.fixture
def runner() -> CliRunner:
    """Click test runner."""
    return CliRunner()


class TestPageCommand:
    """Tests for ``feed page``."""

    def test_mixed_page(self, runner: CliRunner) -> None:
        """The fixture renders a mixed page as JSON on stdout."""
        result = runner.invoke(
            cli, ["page", "--fixture", str(FIXTURE), "--no-json-logs"]
        )

        assert result.exit_code == 0, result.output
        body = json.loads(result.stdout)
        assert body["success"] is True
        ids = {item["id"] for item in body["items"]}
        assert ids == {"t1", "t2", "news-101", "lol_match-e1"}

    def test_enriched_match(self, runner: CliRunner) -> None:
        """Match items carry the roster and team aggregates."""
        result = runner.invoke(
            cli, ["page", "--fixture", str(FIXTURE), "--filter", "lol"]
        )

        assert result.exit_code == 0, result.output
        [item] = json.loads(result.stdout)["items"]
        enriched = item["enriched"]
        assert item["sharedBy"]["username"] == "alice"
        assert enriched["teamTotalKills"] == 8
        assert [p["summonerName"] for p in enriched["allPlayers"]] == [
            "alice#EUW",
            "OlafMain",
            "Player",
        ]
        assert [p["role"] for p in enriched["allPlayers"]] == ["MID", "JUNGLE", "TOP"]

    def test_news_filter(self, runner: CliRunner) -> None:
        """Drafts never appear; summaries are plain text."""
        result = runner.invoke(
            cli, ["page", "--fixture", str(FIXTURE), "--filter", "news"]
        )

        [item] = json.loads(result.stdout)["items"]
        assert item["news"]["summary"] == "Season starts today"
        assert item["news"]["authorName"] == "Editorial"

    def test_missing_fixture(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Running without a fixture is a usage error."""
        monkeypatch.delenv("FEED_FIXTURE_PATH", raising=False)
        result = runner.invoke(cli, ["page"])
        assert result.exit_code == 2
        assert "No fixture given" in result.output

    def test_malformed_fixture(self, runner: CliRunner, tmp_path: Path) -> None:
        """A malformed fixture exits 1."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("videos: []\n", encoding="utf-8")
        result = runner.invoke(cli, ["page", "--fixture", str(bad)])
        assert result.exit_code == 1
        assert "Failed to load fixture" in result.output


class TestDecodeCursorCommand:
    """Tests for ``feed decode-cursor``."""

    def test_valid_token(self, runner: CliRunner) -> None:
        """Watermarks are printed by wire name."""
        token = encode_cursor(FeedCursor(threads_created_at="2025-01-15T09:30:00Z"))
        result = runner.invoke(cli, ["decode-cursor", token])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "threadsCreatedAt": "2025-01-15T09:30:00Z",
            "newsCreatedAt": None,
            "lolCreatedAt": None,
        }

    def test_invalid_token(self, runner: CliRunner) -> None:
        """Malformed tokens exit 1."""
        result = runner.invoke(cli, ["decode-cursor", "not-base64!"])
        assert result.exit_code == 1
        assert "Invalid cursor token." in result.output
