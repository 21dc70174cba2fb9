import unittest
from datetime import datetime, timedelta, timezone

from tribune.db import MemoryStore, SourceRepository
from tribune.models import Source, SourceRunResult
from tribune.pipeline import SourceHealthTracker, apply_fetch_outcome

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def success(count):
    return SourceRunResult(source_id="s1", name="S1", success=True, article_count=count)


def failure(error="feed-parse-failed: HTTP 500"):
    return SourceRunResult(source_id="s1", name="S1", success=False, article_count=0, error=error)


class TestApplyFetchOutcome(unittest.TestCase):
    def setUp(self):
        self.source = Source(id="s1", name="S1", url="https://example.com/feed")

    def test_first_success_seeds_average(self):
        updates = apply_fetch_outcome(self.source, success(4), NOW)
        self.assertEqual(updates["average_articles_per_fetch"], 4.0)
        self.assertEqual(updates["successful_fetches"], 1)
        self.assertEqual(updates["total_articles_fetched"], 4)
        self.assertEqual(updates["consecutive_failures"], 0)
        self.assertEqual(updates["status"], "active")
        self.assertEqual(updates["error_message"], "")
        self.assertEqual(updates["last_fetched_at"], updates["last_success_at"])

    def test_failure_does_not_touch_success_fields(self):
        updates = apply_fetch_outcome(self.source, failure(), NOW)
        self.assertEqual(updates["consecutive_failures"], 1)
        self.assertEqual(updates["error_message"], "feed-parse-failed: HTTP 500")
        self.assertNotIn("last_success_at", updates)
        self.assertNotIn("total_articles_fetched", updates)
        self.assertNotIn("status", updates)

    def test_failure_without_message(self):
        outcome = SourceRunResult(source_id="s1", name="S1", success=False)
        self.assertEqual(apply_fetch_outcome(self.source, outcome, NOW)["error_message"], "Unknown error")


class TestSourceHealthTracker(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.sources = SourceRepository(self.store)
        self.sources.save_source(Source(id="s1", name="S1", url="https://example.com/feed"))
        self.tracker = SourceHealthTracker(self.store, failure_threshold=5)

    def test_moving_average(self):
        self.tracker.record(success(4), NOW)
        source = self.tracker.record(success(2), NOW + timedelta(hours=1))

        self.assertEqual(source.average_articles_per_fetch, 3.0)
        self.assertEqual(source.total_articles_fetched, 6)
        self.assertEqual(source.successful_fetches, 2)
        self.assertEqual(source.last_success_at, NOW + timedelta(hours=1))

    def test_zero_article_success_is_still_success(self):
        source = self.tracker.record(success(0), NOW)
        self.assertEqual(source.status, "active")
        self.assertEqual(source.successful_fetches, 1)
        self.assertEqual(source.average_articles_per_fetch, 0.0)

    def test_error_status_at_threshold(self):
        for attempt in range(1, 5):
            source = self.tracker.record(failure(), NOW + timedelta(minutes=attempt))
            self.assertEqual(source.consecutive_failures, attempt)
            self.assertEqual(source.status, "active")

        source = self.tracker.record(failure(), NOW + timedelta(minutes=5))
        self.assertEqual(source.consecutive_failures, 5)
        self.assertEqual(source.status, "error")
        self.assertEqual(source.last_fetched_at, NOW + timedelta(minutes=5))
        self.assertIsNone(source.last_success_at)

    def test_success_recovers_from_error(self):
        for _ in range(6):
            self.tracker.record(failure(), NOW)

        source = self.tracker.record(success(3), NOW + timedelta(hours=1))
        self.assertEqual(source.status, "active")
        self.assertEqual(source.consecutive_failures, 0)
        self.assertEqual(source.error_message, "")

    def test_failure_keeps_last_success(self):
        self.tracker.record(success(1), NOW)
        source = self.tracker.record(failure(), NOW + timedelta(hours=1))
        self.assertEqual(source.last_success_at, NOW)
        self.assertEqual(source.last_fetched_at, NOW + timedelta(hours=1))
        self.assertEqual(source.total_articles_fetched, 1)

    def test_config_fields_untouched(self):
        self.tracker.record(failure(), NOW)
        source = self.sources.get_source("s1")
        self.assertEqual(source.name, "S1")
        self.assertEqual(source.url, "https://example.com/feed")
        self.assertTrue(source.enabled)

    def test_unknown_source(self):
        outcome = SourceRunResult(source_id="missing", name="Missing", success=True, article_count=1)
        self.assertIsNone(self.tracker.record(outcome, NOW))


if __name__ == "__main__":
    unittest.main()
