import unittest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

from tribune.config import SourceConfig
from tribune.db import ArticleRepository, DocumentNotFoundError, Filter, MemoryStore, RunReportRepository, SourceRepository
from tribune.models import Article, RunReport
from tribune.models.base import format_timestamp


class TestMemoryStore(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()

    def test_insert_if_absent_keeps_first(self):
        self.assertTrue(self.store.insert_if_absent("things", "1", {"id": "1", "v": "first"}))
        self.assertFalse(self.store.insert_if_absent("things", "1", {"id": "1", "v": "second"}))
        self.assertEqual(self.store.get("things", "1")["v"], "first")

    def test_get_returns_copy(self):
        self.store.insert_if_absent("things", "1", {"id": "1", "tags": ["a"]})
        self.store.get("things", "1")["tags"].append("b")
        self.assertEqual(self.store.get("things", "1")["tags"], ["a"])

    def test_update_merges(self):
        self.store.insert_if_absent("things", "1", {"id": "1", "a": 1, "b": 2})
        self.store.update("things", "1", {"b": 3})
        self.assertEqual(self.store.get("things", "1"), {"id": "1", "a": 1, "b": 3})

    def test_update_missing_raises(self):
        with self.assertRaises(DocumentNotFoundError):
            self.store.update("things", "nope", {"a": 1})

    def test_transform(self):
        self.store.insert_if_absent("things", "1", {"id": "1", "n": 1})
        result = self.store.transform("things", "1", lambda doc: {"n": doc["n"] + 1})
        self.assertEqual(result["n"], 2)
        self.assertIsNone(self.store.transform("things", "nope", lambda doc: {}))

    def test_transform_is_atomic_across_threads(self):
        self.store.insert_if_absent("things", "1", {"id": "1", "n": 0})

        def bump(_):
            self.store.transform("things", "1", lambda doc: {"n": doc["n"] + 1})

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(bump, range(200)))

        self.assertEqual(self.store.get("things", "1")["n"], 200)

    def test_query_filter_order_limit(self):
        for i, (kind, rank) in enumerate([("x", 3), ("y", 1), ("x", 2), ("x", None)]):
            self.store.insert_if_absent("things", str(i), {"id": str(i), "kind": kind, "rank": rank})

        docs = self.store.query("things", where=[Filter("kind", "==", "x")], order_by="rank")
        self.assertEqual([d["id"] for d in docs], ["2", "0", "3"])

        docs = self.store.query("things", order_by="rank", descending=True, limit=2)
        self.assertEqual([d["id"] for d in docs], ["0", "2"])

        docs = self.store.query("things", where=[Filter("rank", ">=", 2)])
        self.assertEqual(sorted(d["id"] for d in docs), ["0", "2"])

    def test_filter_across_types(self):
        self.store.insert_if_absent("things", "1", {"id": "1", "rank": 5})
        self.store.insert_if_absent("things", "2", {"id": "2", "rank": "high"})

        docs = self.store.query("things", where=[Filter("rank", ">", 1)])
        self.assertEqual([d["id"] for d in docs], ["1"])

        docs = self.store.query("things", where=[Filter("rank", "==", "5")])
        self.assertEqual([d["id"] for d in docs], ["1"])

        docs = self.store.query("things", where=[Filter("rank", "!=", None)])
        self.assertEqual(sorted(d["id"] for d in docs), ["1", "2"])

    def test_datetime_filter_uses_stored_format(self):
        base = datetime(2024, 5, 1, tzinfo=timezone.utc)
        for i in range(3):
            stamp = format_timestamp(base + timedelta(days=i))
            self.store.insert_if_absent("things", str(i), {"id": str(i), "at": stamp})

        docs = self.store.query("things", where=[Filter("at", ">=", base + timedelta(days=1))])
        self.assertEqual(sorted(d["id"] for d in docs), ["1", "2"])

    def test_delete(self):
        self.store.insert_if_absent("things", "1", {"id": "1"})
        self.assertTrue(self.store.delete("things", "1"))
        self.assertFalse(self.store.delete("things", "1"))
        self.assertIsNone(self.store.get("things", "1"))


class TestRepositories(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()

    def test_sync_sources_preserves_health(self):
        repo = SourceRepository(self.store)
        repo.sync_sources([SourceConfig(name="BBC News", url="https://bbc.example.com/rss")])
        self.store.update("sources", "bbc-news", {"consecutive_failures": 3})

        repo.sync_sources([SourceConfig(name="BBC News", url="https://bbc.example.com/rss2", priority=2)])

        source = repo.get_source("bbc-news")
        self.assertEqual(source.url, "https://bbc.example.com/rss2")
        self.assertEqual(source.priority, 2)
        self.assertEqual(source.consecutive_failures, 3)

    def test_source_ordering_and_toggle(self):
        repo = SourceRepository(self.store)
        repo.sync_sources([
            SourceConfig(name="Zeta", url="https://z.example.com", priority=1),
            SourceConfig(name="alpha", url="https://a.example.com", priority=5),
            SourceConfig(name="Beta", url="https://b.example.com", priority=5),
        ])
        self.assertEqual([s.name for s in repo.get_all_sources()], ["Zeta", "alpha", "Beta"])

        self.assertFalse(repo.toggle_source("beta"))
        self.assertEqual([s.name for s in repo.get_enabled_sources()], ["Zeta", "alpha"])
        with self.assertRaises(ValueError):
            repo.toggle_source("missing")

    def test_set_enabled(self):
        repo = SourceRepository(self.store)
        repo.sync_sources([SourceConfig(name="Gamma", url="https://g.example.com")])

        repo.set_enabled("gamma", False)
        self.assertFalse(repo.get_source("gamma").enabled)
        self.assertEqual(repo.get_enabled_sources(), [])
        with self.assertRaises(DocumentNotFoundError):
            repo.set_enabled("missing", True)

    def test_articles_since_and_cleanup(self):
        repo = ArticleRepository(self.store)
        now = datetime.now(timezone.utc)
        for i, age in enumerate([1, 5, 40]):
            repo.save_if_absent(
                Article(
                    id=str(i),
                    title=f"Story {i}",
                    url=f"https://example.com/{i}",
                    source_id="s",
                    source_name="S",
                    fetched_at=now - timedelta(days=age),
                    categories=["tech"] if i == 1 else [],
                )
            )

        recent = repo.get_articles_since(now - timedelta(days=10))
        self.assertEqual([a.id for a in recent], ["0", "1"])
        self.assertEqual([a.id for a in repo.get_articles_by_category("tech")], ["1"])
        self.assertEqual(repo.delete_old_articles(30), 1)
        self.assertEqual([a.id for a in repo.get_recent_articles()], ["0", "1"])

    def test_run_reports(self):
        repo = RunReportRepository(self.store)
        now = datetime.now(timezone.utc)
        old_id = repo.append(RunReport(timestamp=now - timedelta(days=60)))
        new_id = repo.append(RunReport(timestamp=now, sources_processed=2))

        self.assertEqual([r.id for r in repo.get_recent(5)], [new_id, old_id])
        self.assertEqual(repo.delete_old(30), 1)
        self.assertEqual([r.id for r in repo.get_recent(5)], [new_id])


if __name__ == "__main__":
    unittest.main()
