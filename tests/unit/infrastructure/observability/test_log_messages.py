"""Tests for the pipeline log message templates."""

from freshspot.infrastructure.observability.log_messages import LogMessages, LogTemplate


class TestLogTemplate:
    """Test tree formatting."""

    def test_last_field_closes_tree_without_hint(self):
        """Test the last field gets the closing branch."""
        text = LogTemplate(icon="ℹ️", title="Title", fields={"A": "1", "B": "2"}).format()
        assert text.splitlines() == ["ℹ️ Title", "├─ A: 1", "└─ B: 2"]

    def test_hint_closes_tree(self):
        """Test the hint is always the last line."""
        text = LogTemplate(icon="🔴", title="T", fields={"A": "1"}, hint="do X").format()
        assert text.splitlines() == ["🔴 T", "├─ A: 1", "└─ 💡 do X"]


class TestLogMessages:
    """Test the message catalogue."""

    def test_catalog_batch_failed(self):
        """Test kind and item count appear."""
        text = LogMessages.catalog_batch_failed(kind="album", item_count=20, error="502")
        assert text.startswith("🔴 Spotify Album Batch Failed")
        assert "Items: 20" in text
        assert "Reason: 502" in text

    def test_enrichment_failed_mentions_not_cached(self):
        """Test the hint explains the item comes back next time."""
        text = LogMessages.enrichment_failed(item_id="abc", reason="no images")
        assert "Item: abc" in text
        assert "Not cached" in text

    def test_reference_malformed_truncates_text(self):
        """Test long selftexts are cut."""
        text = LogMessages.reference_malformed(item_id="abc", text="x" * 500)
        assert "x" * 120 in text
        assert "x" * 121 not in text

    def test_feed_fetch_failed(self):
        """Test the target url is included."""
        text = LogMessages.feed_fetch_failed(url="https://reddit.test/r/x", error="503")
        assert "Target: https://reddit.test/r/x" in text
