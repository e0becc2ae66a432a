"""Unit tests for FeedHealth."""

from price_oracle.src.FeedHealth import FeedHealth, FeedStatus


class TestFeedHealthInit:
    """Test FeedHealth initialization."""

    def test_init_with_feeds(self) -> None:
        """Feeds should be tracked from init."""
        health = FeedHealth(["a", "b", "c"])
        assert health.feeds == ["a", "b", "c"]
        assert len(health.get_all_status()) == 3

    def test_init_empty(self) -> None:
        """No feeds is fine."""
        health = FeedHealth()
        assert health.feeds == []
        assert health.get_all_status() == {}

    def test_duplicate_feeds_tracked_once(self) -> None:
        """Duplicate names are tracked once."""
        health = FeedHealth(["a", "a"])
        assert health.feeds == ["a"]


class TestFeedHealthRecording:
    """Test success and failure recording."""

    def test_failure_counts(self) -> None:
        """Failures increment both counters and keep the reason."""
        health = FeedHealth(["a"])
        health.record_failure("a", "HTTP 500: boom")
        health.record_failure("a", "timed out after 5.0s")

        status = health.get_feed_status("a")
        assert status.consecutive_failures == 2
        assert status.total_failures == 2
        assert status.last_error == "timed out after 5.0s"

    def test_success_resets_streak(self) -> None:
        """Success resets the streak and clears the last error."""
        health = FeedHealth(["a"])
        health.record_failure("a", "boom")
        health.record_success("a")

        status = health.get_feed_status("a")
        assert status.consecutive_failures == 0
        assert status.total_failures == 1
        assert status.total_successes == 1
        assert status.last_error is None

    def test_unknown_feed_is_tracked(self) -> None:
        """Recording for an unknown feed starts tracking it."""
        health = FeedHealth(["a"])
        health.record_success("b")
        assert health.feeds == ["a", "b"]
        assert health.get_feed_status("b").total_successes == 1

    def test_get_unknown_status(self) -> None:
        """Unknown feeds have no status."""
        assert FeedHealth(["a"]).get_feed_status("zzz") is None


class TestFeedHealthSnapshots:
    """Test that returned statuses are copies."""

    def test_status_is_copy(self) -> None:
        """Mutating a returned status does not affect the tracker."""
        health = FeedHealth(["a"])
        health.record_failure("a", "boom")

        snapshot = health.get_feed_status("a")
        snapshot.consecutive_failures = 99
        all_status = health.get_all_status()
        all_status["a"] = FeedStatus()

        assert health.get_feed_status("a").consecutive_failures == 1
